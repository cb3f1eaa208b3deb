"""Tests for the ffuu command-line interface."""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from ffuu.cli import build_parser, main
from ffuu.config import LOG_LEVEL_ENV_KEY, OUTPUT_DIR_ENV_KEY


class CliTestCase(unittest.TestCase):
    """Runs `main` with byte-level stdin and stdout and a clean environment."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        env = mock.patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(OUTPUT_DIR_ENV_KEY, None)
        os.environ.pop(LOG_LEVEL_ENV_KEY, None)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str, stdin: bytes = b"") -> tuple[int, str]:
        # Latin-1 wrappers: the CLI must bypass the text layer and speak UTF-8.
        fake_stdin = io.TextIOWrapper(io.BytesIO(stdin), encoding="latin-1")
        stdout_bytes = io.BytesIO()
        fake_stdout = io.TextIOWrapper(stdout_bytes, encoding="latin-1")
        with mock.patch("sys.stdin", fake_stdin), mock.patch("sys.stdout", fake_stdout):
            code = main(list(argv))
        fake_stdout.flush()
        return code, stdout_bytes.getvalue().decode("utf-8")

    def blocker(self) -> Path:
        """A regular file standing where a directory is needed."""
        path = self.tmp / "blocker"
        path.write_text("not a directory", encoding="utf-8")
        return path


class TestParser(unittest.TestCase):
    def test_subcommand_is_required(self) -> None:
        """Running without a subcommand is a usage error."""
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
            build_parser().parse_args([])

    def test_verbosity_flags(self) -> None:
        """Global flags come before the subcommand and -v can repeat."""
        args = build_parser().parse_args(["-vv", "--embed-tag", "exec", "format"])
        assert args.verbose == 2
        assert args.embed_tag == "exec"
        assert args.input is None


class TestFormat(CliTestCase):
    def test_file_to_file(self) -> None:
        """Embeds run and the result is written formatted to -o."""
        source = self.tmp / "page.html"
        source.write_text('<div><p>Hi <run command="echo there" /></p></div>', encoding="utf-8")
        target = self.tmp / "out.html"
        code, stdout = self.run_cli("format", str(source), "-o", str(target))
        assert code == 0
        assert stdout == ""
        assert target.read_text(encoding="utf-8") == "<div>\n  <p>Hi there</p>\n</div>"

    def test_stdin_without_embeds(self) -> None:
        """--no-embeds only reformats, leaving directives in place."""
        code, stdout = self.run_cli("format", "--no-embeds", stdin=b'<ul><li><run command="date" /></li></ul>')
        assert code == 0
        assert stdout == '<ul>\n  <li>\n    <run command="date" />\n  </li>\n</ul>'

    def test_stdio_is_utf8(self) -> None:
        """Standard input and output are UTF-8 whatever the stream encoding."""
        source = "<p>café ☃</p>".encode()
        code, stdout = self.run_cli("format", "--no-embeds", stdin=source)
        assert code == 0
        assert stdout == "<p>café ☃</p>"

    def test_non_utf8_stdin_fails(self) -> None:
        """Undecodable standard input is a document failure."""
        code, stdout = self.run_cli("format", stdin=b"<p>\xff</p>")
        assert code == 1
        assert stdout == ""

    def test_custom_embed_tag(self) -> None:
        """--embed-tag changes which tag is treated as a directive."""
        code, stdout = self.run_cli("--embed-tag", "exec", "format", stdin=b'<exec command="echo x" />')
        assert code == 0
        assert stdout == "x"

    def test_parse_error_exits_non_zero(self) -> None:
        """Markup that does not tokenize exits with status 1."""
        code, stdout = self.run_cli("format", stdin=b"<p>1 < 2</p>")
        assert code == 1
        assert stdout == ""

    def test_missing_input_file(self) -> None:
        """A missing input file exits with status 1."""
        code, _ = self.run_cli("format", str(self.tmp / "missing.html"))
        assert code == 1


class TestBuild(CliTestCase):
    def test_build(self) -> None:
        """HTML and Markdown documents are processed into the output directory."""
        input_dir = self.tmp / "in"
        input_dir.mkdir()
        (input_dir / "index.html").write_text('<h1><run command="echo Home" /></h1>', encoding="utf-8")
        (input_dir / "about.md").write_text("# About", encoding="utf-8")
        output_dir = self.tmp / "out"

        code, _ = self.run_cli("build", str(input_dir), str(output_dir))

        assert code == 0
        assert (output_dir / "index.html").read_text(encoding="utf-8") == "<h1>Home</h1>"
        assert (output_dir / "about.html").read_text(encoding="utf-8") == "<h1>About</h1>"

    def test_build_with_failure(self) -> None:
        """One bad document fails the build but not its siblings."""
        input_dir = self.tmp / "in"
        input_dir.mkdir()
        (input_dir / "good.html").write_text("<p>ok</p>", encoding="utf-8")
        (input_dir / "bad.html").write_text("<p>1 < 2</p>", encoding="utf-8")
        output_dir = self.tmp / "out"

        code, _ = self.run_cli("build", str(input_dir), str(output_dir))

        assert code == 1
        assert (output_dir / "good.html").exists()
        assert not (output_dir / "bad.html").exists()

    def test_build_into_blocked_output_dir(self) -> None:
        """An output directory that cannot be created exits with status 1."""
        input_dir = self.tmp / "in"
        input_dir.mkdir()
        (input_dir / "index.html").write_text("<p>ok</p>", encoding="utf-8")

        code, _ = self.run_cli("build", str(input_dir), str(self.blocker() / "out"))

        assert code == 1


class TestSite(CliTestCase):
    def write_site(self) -> Path:
        site = self.tmp / "site"
        site.mkdir()
        (site / "index.html").write_text('<link href="style.css"><a href="https://example.com">x</a>', encoding="utf-8")
        (site / "style.css").write_text("p {}", encoding="utf-8")
        return site / "index.html"

    def test_site(self) -> None:
        """The output directory is cleared and gets the page and its assets."""
        index = self.write_site()
        output_dir = self.tmp / "out"
        output_dir.mkdir()
        (output_dir / "stale.txt").write_text("old", encoding="utf-8")

        code, _ = self.run_cli("site", str(index), str(output_dir))

        assert code == 0
        assert sorted(path.name for path in output_dir.iterdir()) == ["index.html", "style.css"]

    def test_site_into_blocked_output_dir(self) -> None:
        """An output directory below a regular file exits with status 1."""
        index = self.write_site()
        code, _ = self.run_cli("site", str(index), str(self.blocker() / "out"))
        assert code == 1

    def test_site_output_dir_is_a_file(self) -> None:
        """An output path that is a regular file exits with status 1."""
        index = self.write_site()
        blocker = self.blocker()
        code, _ = self.run_cli("site", str(index), str(blocker))
        assert code == 1
        assert blocker.read_text(encoding="utf-8") == "not a directory"


class TestAdd(CliTestCase):
    def test_add(self) -> None:
        """stdin is copied under the output directory and the site path printed."""
        os.environ[OUTPUT_DIR_ENV_KEY] = str(self.tmp)
        code, stdout = self.run_cli("add", "img/chart.svg", stdin=b"<svg></svg>")
        assert code == 0
        assert stdout == "/img/chart.svg"
        assert (self.tmp / "img" / "chart.svg").read_bytes() == b"<svg></svg>"

    def test_add_requires_output_dir(self) -> None:
        """Without FFUU_OUTPUT_DIR nothing is written."""
        code, stdout = self.run_cli("add", "chart.svg", stdin=b"data")
        assert code == 1
        assert stdout == ""

    def test_add_rejects_escaping_paths(self) -> None:
        """Absolute paths and .. segments are refused."""
        os.environ[OUTPUT_DIR_ENV_KEY] = str(self.tmp / "out")
        assert self.run_cli("add", "../chart.svg", stdin=b"data")[0] == 1
        assert self.run_cli("add", "/etc/chart.svg", stdin=b"data")[0] == 1
        assert not (self.tmp / "chart.svg").exists()

    def test_add_into_blocked_output_dir(self) -> None:
        """An output directory that is a regular file exits with status 1."""
        os.environ[OUTPUT_DIR_ENV_KEY] = str(self.blocker())
        code, stdout = self.run_cli("add", "img/a.svg", stdin=b"<svg></svg>")
        assert code == 1
        assert stdout == ""

    def test_bad_log_level_from_env(self) -> None:
        """An unknown FFUU_LOG_LEVEL is a configuration error."""
        os.environ[LOG_LEVEL_ENV_KEY] = "chatty"
        assert self.run_cli("markdown", stdin=b"x")[0] == 1


class TestMarkdown(CliTestCase):
    def test_markdown_stdin(self) -> None:
        """Markdown on stdin is rendered to stdout."""
        code, stdout = self.run_cli("markdown", stdin=b"Some *text*.")
        assert code == 0
        assert stdout == "<p>Some <em>text</em>.</p>"

    def test_markdown_file(self) -> None:
        """Markdown from a file is rendered to -o."""
        source = self.tmp / "post.md"
        source.write_text("## Sub", encoding="utf-8")
        target = self.tmp / "post.html"
        assert self.run_cli("markdown", str(source), "-o", str(target))[0] == 0
        assert target.read_text(encoding="utf-8") == "<h2>Sub</h2>"
