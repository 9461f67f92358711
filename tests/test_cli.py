# =============================================================================
# test_cli.py - Command-Line Tool Tests
# =============================================================================
# Tests for lmasm and lmvm, including exit codes and the full
# assemble-then-run workflow.
# =============================================================================

import pytest
from click.testing import CliRunner

from littleman.cli import lmasm, lmvm
from littleman.cli.errors import ExitCode, describe_error, handle_cli_exception
from littleman.errors import (
    ImageError,
    LittleManError,
    NumberOutOfRangeError,
    UndefinedLabelError,
)
from littleman.image import read_image, write_image


ECHO = """
.loop
    read
    bz done
    print
    b loop
.done
    stop
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def echo_source(tmp_path):
    path = tmp_path / "echo.lmc"
    path.write_text(ECHO)
    return path


# =============================================================================
# lmasm Tests
# =============================================================================

class TestLmasm:
    """Test the assembler command."""

    def test_help(self, runner):
        """Test --help option."""
        result = runner.invoke(lmasm.main, ["--help"])
        assert result.exit_code == 0
        assert "--strict-labels" in result.output

    def test_version(self, runner):
        """Test --version option."""
        result = runner.invoke(lmasm.main, ["--version"])
        assert result.exit_code == 0
        assert "lmasm" in result.output

    def test_assemble(self, runner, echo_source, tmp_path):
        """Source assembles to an image file."""
        out = tmp_path / "echo.bin"
        result = runner.invoke(lmasm.main, [str(echo_source), "-o", str(out)])
        assert result.exit_code == ExitCode.SUCCESS
        assert read_image(out) == [901, 704, 902, 600, 0]

    def test_default_output(self, runner, echo_source, tmp_path):
        """Without -o the image is written to a.out."""
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(lmasm.main, [str(echo_source)])
            assert result.exit_code == 0
            assert read_image("a.out") == [901, 704, 902, 600, 0]

    def test_listing_and_symbols(self, runner, echo_source, tmp_path):
        """-l and -s write extra files."""
        out = tmp_path / "echo.bin"
        lst = tmp_path / "echo.lst"
        sym = tmp_path / "echo.sym"
        result = runner.invoke(lmasm.main, [
            str(echo_source), "-o", str(out), "-l", str(lst), "-s", str(sym),
        ])
        assert result.exit_code == 0
        assert "bz done" in lst.read_text()
        assert "done 04" in sym.read_text()
        assert "loop 00" in sym.read_text()

    def test_verbose(self, runner, echo_source, tmp_path):
        """Verbose mode reports what was written."""
        out = tmp_path / "echo.bin"
        result = runner.invoke(lmasm.main, [str(echo_source), "-o", str(out), "-v"])
        assert result.exit_code == 0
        assert "5 words" in result.output

    def test_syntax_error(self, runner, tmp_path):
        """Assembly errors exit with status 1 and show the location."""
        src = tmp_path / "bad.lmc"
        src.write_text("read\nfoo 3\n")
        out = tmp_path / "bad.bin"
        result = runner.invoke(lmasm.main, [str(src), "-o", str(out)])
        assert result.exit_code == ExitCode.ERROR
        assert "Assembly error" in result.output
        assert ":2:" in result.output
        assert not out.exists()

    def test_undefined_label_error(self, runner, tmp_path):
        """Undefined labels are reported with a hint."""
        src = tmp_path / "typo.lmc"
        src.write_text(".loop\nread\nb lop\n")
        result = runner.invoke(lmasm.main, [str(src), "-o", str(tmp_path / "t.bin")])
        assert result.exit_code == ExitCode.ERROR
        assert "undefined label 'lop'" in result.output
        assert "did you mean 'loop'?" in result.output

    def test_strict_labels(self, runner, tmp_path):
        """--strict-labels turns a duplicate label into an error."""
        src = tmp_path / "dup.lmc"
        src.write_text(".x\nread\n.x\nstop\n")
        out = tmp_path / "dup.bin"

        result = runner.invoke(lmasm.main, [str(src), "-o", str(out)])
        assert result.exit_code == 0

        result = runner.invoke(lmasm.main, [str(src), "-o", str(out), "--strict-labels"])
        assert result.exit_code == ExitCode.ERROR
        assert "duplicate label 'x'" in result.output

    def test_missing_input(self, runner, tmp_path):
        """A missing source file is a usage error."""
        result = runner.invoke(lmasm.main, [str(tmp_path / "missing.lmc")])
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# lmvm Tests
# =============================================================================

class TestLmvm:
    """Test the virtual machine command."""

    @pytest.fixture
    def echo_image(self, tmp_path):
        path = tmp_path / "echo.bin"
        write_image(path, [901, 704, 902, 600, 0])
        return path

    def test_help(self, runner):
        """Test --help option."""
        result = runner.invoke(lmvm.main, ["--help"])
        assert result.exit_code == 0
        assert "--max-steps" in result.output

    def test_run_with_inputs(self, runner, echo_image):
        """Each print produces an OUTPUT line."""
        result = runner.invoke(lmvm.main, [str(echo_image), "-i", "7", "--input=-3"])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.splitlines() == ["OUTPUT: 7", "OUTPUT: -3"]

    def test_run_without_inputs(self, runner, echo_image):
        """With no inputs read is a no-op and the program stops."""
        result = runner.invoke(lmvm.main, [str(echo_image)])
        assert result.exit_code == 0
        assert result.output == ""

    def test_offset_and_entry(self, runner, tmp_path):
        """Images can be loaded and started away from mailbox 0."""
        path = tmp_path / "p.bin"
        write_image(path, [901, 902, 0])
        result = runner.invoke(lmvm.main, [
            str(path), "--offset", "30", "--entry", "30", "-i", "12",
        ])
        assert result.exit_code == 0
        assert "OUTPUT: 12" in result.output

    def test_runtime_error(self, runner, tmp_path):
        """Runtime errors exit with status 1 after earlier output."""
        path = tmp_path / "overflow.bin"
        # read; print; sto 50; add 50; stop
        write_image(path, [901, 902, 350, 150, 0])
        result = runner.invoke(lmvm.main, [str(path), "-i", "300"])
        assert result.exit_code == ExitCode.ERROR
        assert "OUTPUT: 300" in result.output
        assert "Runtime error" in result.output
        assert "600" in result.output

    def test_invalid_instruction(self, runner, tmp_path):
        """Executing a data word is a runtime error."""
        path = tmp_path / "data.bin"
        write_image(path, [42])
        result = runner.invoke(lmvm.main, [str(path)])
        assert result.exit_code == ExitCode.ERROR
        assert "invalid instruction 42" in result.output

    def test_program_does_not_fit(self, runner, tmp_path):
        """Images that overflow memory at the offset are rejected."""
        path = tmp_path / "big.bin"
        write_image(path, [0] * 10)
        result = runner.invoke(lmvm.main, [str(path), "--offset", "95"])
        assert result.exit_code == ExitCode.ERROR
        assert "does not fit" in result.output

    def test_max_steps(self, runner, tmp_path):
        """An endless loop fails once the step limit is reached."""
        path = tmp_path / "loop.bin"
        write_image(path, [600])
        result = runner.invoke(lmvm.main, [str(path), "--max-steps", "100"])
        assert result.exit_code == ExitCode.STEP_LIMIT
        assert "no stop after 100 steps" in result.output

    def test_bad_offset(self, runner, echo_image):
        """Offsets outside the mailboxes are usage errors."""
        result = runner.invoke(lmvm.main, [str(echo_image), "--offset", "100"])
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# Workflow Tests
# =============================================================================

class TestWorkflow:
    """Assemble with lmasm, run with lmvm."""

    def test_assemble_then_run(self, runner, tmp_path):
        """The difference program prints -10 for inputs 7 and -3."""
        src = tmp_path / "diff.lmc"
        src.write_text("read\nsto 50\nread\nsub 50\nprint\nstop\n")
        image = tmp_path / "diff.bin"

        result = runner.invoke(lmasm.main, [str(src), "-o", str(image)])
        assert result.exit_code == 0

        result = runner.invoke(lmvm.main, [str(image), "-i", "7", "--input=-3"])
        assert result.exit_code == 0
        assert result.output.strip() == "OUTPUT: -10"


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrorReporting:
    """Test how exceptions become messages and exit codes."""

    def test_labels_by_family(self):
        """Each error family gets its own heading."""
        assert describe_error(UndefinedLabelError("x")).startswith("Assembly error: ")
        assert describe_error(ImageError("bad word")) == "Image error: bad word"
        assert describe_error(NumberOutOfRangeError(600)).startswith("Runtime error: number 600")
        assert describe_error(LittleManError("other")) == "Error: other"

    @pytest.mark.parametrize("error,code", [
        (ImageError("bad word"), ExitCode.ERROR),
        (NumberOutOfRangeError(-501), ExitCode.ERROR),
        (FileNotFoundError("missing.bin"), ExitCode.INVALID_ARGS),
        (PermissionError("locked"), ExitCode.INVALID_ARGS),
        (ValueError("boom"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_codes(self, error, code):
        """Exceptions map to the documented exit statuses."""
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)
        assert exc_info.value.code == code

    def test_step_limit_is_distinct(self):
        """Running out of steps is not confused with a runtime error."""
        assert ExitCode.STEP_LIMIT not in (ExitCode.ERROR, ExitCode.INTERNAL_ERROR)
