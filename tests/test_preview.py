"""Tests for preview strategy priority and placeholders."""

from __future__ import annotations

import os
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest import mock

from lazyfm import preview
from lazyfm.entries import entry_for_path
from lazyfm.preview import (
    EMPTY_PREVIEW,
    ImagePath,
    PreviewLines,
    PreviewRequest,
    PreviewStrategy,
    RawGraphics,
    resolve_preview,
    resolve_request,
)


def _resolve(path: Path, max_lines: int = 20, **kwargs) -> object:
    kwargs.setdefault("supports_inline_images", False)
    kwargs.setdefault("show_hidden", False)
    kwargs.setdefault("use_color", False)
    return resolve_preview(entry_for_path(path), max_lines, **kwargs)


class DirectoryPreviewTests(unittest.TestCase):
    def test_directory_lists_children_with_separator(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            (root / "file.txt").write_text("", encoding="utf-8")
            (root / ".hidden").write_text("", encoding="utf-8")

            content = _resolve(root)
            with_hidden = _resolve(root, show_hidden=True)

        self.assertEqual(content, PreviewLines((f"sub{os.sep}", "file.txt")))
        self.assertEqual(with_hidden.lines, (f"sub{os.sep}", ".hidden", "file.txt"))

    def test_directory_listing_is_truncated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for idx in range(10):
                (root / f"f{idx}").write_text("", encoding="utf-8")

            content = _resolve(root, max_lines=3)

        self.assertEqual(content.lines, ("f0", "f1", "f2"))

    def test_unreadable_directory_shows_access_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazyfm.preview.list_directory", side_effect=PermissionError(13, "denied")):
                content = _resolve(Path(tmp))

        self.assertEqual(content, PreviewLines(("Access Denied",)))


class ImagePreviewTests(unittest.TestCase):
    def test_inline_capable_terminal_gets_image_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "pic.png"
            image.write_bytes(b"\x89PNG\r\n")

            content = _resolve(image, supports_inline_images=True)

        self.assertEqual(content, ImagePath(image))

    def test_no_inline_support_without_chafa_shows_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "pic.jpg"
            image.write_bytes(b"\xff\xd8")

            with mock.patch("lazyfm.preview.shutil.which", return_value=None):
                content = _resolve(image)

        self.assertEqual(content, PreviewLines(("Image file (No preview)",)))

    def test_chafa_backend_yields_raw_graphics(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "pic.gif"
            image.write_bytes(b"GIF89a")

            with mock.patch("lazyfm.preview.run_command_bytes", return_value=b"\x1b[31m##\n") as run_mock:
                content = _resolve(image, supports_inline_images=True, image_backend="sixels", width=30, max_lines=12)

        self.assertEqual(content, RawGraphics(b"\x1b[31m##\n"))
        self.assertEqual(run_mock.call_args.args[0][:5], ["chafa", "-f", "sixels", "-s", "30x12"])

    def test_none_backend_never_runs_chafa(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "pic.bmp"
            image.write_bytes(b"BM")

            with mock.patch("lazyfm.preview.run_command_bytes") as run_mock:
                content = _resolve(image, image_backend="none")

        run_mock.assert_not_called()
        self.assertEqual(content.lines, ("Image file (No preview)",))


class ToolPreviewTests(unittest.TestCase):
    def test_media_info_lines_are_capped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            media = Path(tmp) / "song.mp3"
            media.write_bytes(b"ID3")

            with mock.patch("lazyfm.preview.run_command", return_value=["General", "Format : MPEG", "x"]):
                content = _resolve(media, max_lines=2)

        self.assertEqual(content.lines, ("General", "Format : MPEG"))

    def test_missing_media_tool_falls_through(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            media = Path(tmp) / "clip.mp4"
            media.write_bytes(b"\x00\x00\x00\x18ftyp")

            with mock.patch("lazyfm.preview.run_command", return_value=None):
                content = _resolve(media)

        self.assertEqual(content.lines, ("Binary file",))

    def test_zip_members_are_listed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "bundle.zip"
            with zipfile.ZipFile(archive, "w") as handle:
                handle.writestr("a.txt", "a")
                handle.writestr("dir/b.txt", "b")

            content = _resolve(archive)

        self.assertEqual(content.lines, ("a.txt", "dir/b.txt"))

    def test_corrupt_zip_reports_error_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "broken.zip"
            archive.write_bytes(b"not a zip")

            content = _resolve(archive)

        self.assertEqual(len(content.lines), 1)
        self.assertTrue(content.lines[0].startswith("Zip Error: "))

    def test_tar_listing_uses_tool_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "src.tgz"
            archive.write_bytes(b"")

            with mock.patch("lazyfm.preview.run_command", return_value=["src/", "src/main.c"]) as run_mock:
                content = _resolve(archive)

        run_mock.assert_called_once_with(["tar", "-tf", str(archive)])
        self.assertEqual(content.lines, ("src/", "src/main.c"))

    def test_missing_archive_tool_reports_error_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "pack.7z"
            archive.write_bytes(b"7z")

            with mock.patch("lazyfm.preview.run_command", return_value=None):
                content = _resolve(archive)

        self.assertEqual(content.lines, ("Archive Error: '7z' is not available",))


class FilePreviewTests(unittest.TestCase):
    def test_binary_extension_is_never_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blob = Path(tmp) / "tool.exe"
            blob.write_bytes(b"MZ")

            with mock.patch("lazyfm.preview.looks_binary") as sniff_mock:
                content = _resolve(blob)

        sniff_mock.assert_not_called()
        self.assertEqual(content.lines, ("Binary file",))

    def test_oversized_file_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            big = Path(tmp) / "big.log"
            with big.open("wb") as handle:
                handle.truncate(preview.MAX_PREVIEW_BYTES + 1)

            content = _resolve(big)

        self.assertEqual(content.lines, ("File too large to preview",))

    def test_nul_bytes_mark_binary(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blob = Path(tmp) / "data.dat"
            blob.write_bytes(b"abc\x00def")

            content = _resolve(blob)

        self.assertEqual(content.lines, ("Binary file",))

    def test_plain_text_head(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            text = Path(tmp) / "notes.txt"
            text.write_text("one\ntwo\nthree\n", encoding="utf-8")

            content = _resolve(text, max_lines=2)

        self.assertEqual(content.lines, ("one", "two"))

    def test_errors_become_single_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            text = Path(tmp) / "notes.txt"
            text.write_text("x", encoding="utf-8")

            with mock.patch("lazyfm.preview.highlighted_head", side_effect=RuntimeError("boom")):
                content = _resolve(text)

        self.assertEqual(content.lines, ("Error reading preview: boom",))


class StrategyOrderTests(unittest.TestCase):
    def test_first_matching_producer_wins_and_none_falls_through(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            request = PreviewRequest(
                entry=entry_for_path(Path(tmp)),
                max_lines=5,
                supports_inline_images=False,
                show_hidden=False,
            )
            calls: list[str] = []

            def producer(name: str, result):
                def produce(_request: PreviewRequest):
                    calls.append(name)
                    return result

                return produce

            strategies = (
                PreviewStrategy("skip", lambda _r: False, producer("skip", PreviewLines(("skip",)))),
                PreviewStrategy("pass", lambda _r: True, producer("pass", None)),
                PreviewStrategy("win", lambda _r: True, producer("win", PreviewLines(("win",)))),
                PreviewStrategy("late", lambda _r: True, producer("late", PreviewLines(("late",)))),
            )

            content = resolve_request(request, strategies)
            nothing = resolve_request(request, strategies[:2])

        self.assertEqual(content, PreviewLines(("win",)))
        self.assertEqual(calls, ["pass", "win", "pass"])
        self.assertEqual(nothing, EMPTY_PREVIEW)


if __name__ == "__main__":
    unittest.main()
