"""Unit tests for the generator and cli modules."""

import os
import tempfile

import pytest

from screenflow.cli import main
from screenflow.errors import FontLoadError
from screenflow.generator import ScreenFlowGenerator, generate_screen_flow


class TestScreenFlowGeneratorInit:
    """Tests for ScreenFlowGenerator initialization."""

    def test_default_initialization(self):
        gen = ScreenFlowGenerator()
        assert gen.max_text_width == 36
        assert gen.horizontal_spacing == 4
        assert gen.vertical_spacing == 2
        assert gen.shadow is True
        assert gen.font is None

    def test_custom_parameters(self):
        gen = ScreenFlowGenerator(max_text_width=20, shadow=False, font="Menlo")
        assert gen.max_text_width == 20
        assert gen.shadow is False
        assert gen.font == "Menlo"


class TestGenerate:
    """Tests for text generation."""

    def test_generate(self, login_input):
        output = ScreenFlowGenerator().generate(login_input)
        assert "[Login]" in output
        assert "[Login] ──Sign in──► [Home]" in output

    def test_generate_empty(self):
        assert ScreenFlowGenerator().generate("") == ""

    def test_generate_prose_only(self):
        """Input with no screens renders nothing rather than failing."""
        assert ScreenFlowGenerator().generate("just some notes") == ""

    def test_convenience_function(self):
        assert "[A]" in generate_screen_flow("[A]", shadow=False)

    def test_parse_and_validate(self, duplicate_input):
        gen = ScreenFlowGenerator()
        assert gen.parse(duplicate_input).names() == ["Start", "Shared", "Shared"]
        assert gen.validate(duplicate_input).duplicate_names == {"Shared": [1, 2]}


class TestSave:
    """Tests for save_txt and save_png."""

    def test_save_txt(self, login_input):
        with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as f:
            output_path = f.name

        try:
            ScreenFlowGenerator().save_txt(login_input, output_path)
            with open(output_path, encoding="utf-8") as f:
                assert "[Login]" in f.read()
        finally:
            os.unlink(output_path)

    def test_save_png(self, login_input):
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            result = ScreenFlowGenerator().save_png(login_input, output_path, scale=1)
            assert result == output_path
            assert os.path.getsize(output_path) > 0
        finally:
            os.unlink(output_path)

    def test_save_png_bad_font(self, tmp_path):
        gen = ScreenFlowGenerator(font="/nonexistent/NoSuchFont.ttf")
        with pytest.raises(FontLoadError):
            gen.save_png("[A]", str(tmp_path / "out.png"))


class TestCli:
    """Tests for the command line entry point."""

    @pytest.fixture
    def flow_file(self, tmp_path, login_input):
        path = tmp_path / "flow.txt"
        path.write_text(login_input, encoding="utf-8")
        return path

    def test_prints_text(self, flow_file, capsys):
        assert main([str(flow_file)]) == 0
        assert "[Login]" in capsys.readouterr().out

    def test_writes_png_by_suffix(self, flow_file, tmp_path):
        output = tmp_path / "flow.png"
        assert main([str(flow_file), "-o", str(output)]) == 0
        assert output.exists()

    def test_writes_txt(self, flow_file, tmp_path):
        output = tmp_path / "flow.txt.out"
        assert main([str(flow_file), "-o", str(output), "--format", "txt"]) == 0
        assert "[Home]" in output.read_text(encoding="utf-8")

    def test_check_reports_problems(self, flow_file, capsys):
        """The login flow has dangling targets, so --check fails."""
        assert main([str(flow_file), "--check"]) == 1
        err = capsys.readouterr().err
        assert "undefined screen 'Lockout'" in err
        assert "undefined screen 'Help'" in err

    def test_check_clean(self, tmp_path, linear_input, capsys):
        path = tmp_path / "linear.txt"
        path.write_text(linear_input, encoding="utf-8")
        assert main([str(path), "--check"]) == 0

    def test_missing_input_file(self, tmp_path, caplog):
        """An unreadable input file is reported, not raised."""
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert "missing.txt" in caplog.text

    def test_bad_font_exit_code(self, flow_file, tmp_path):
        output = tmp_path / "flow.png"
        args = [str(flow_file), "-o", str(output), "--font", "/nonexistent/x.ttf"]
        assert main(args) == 1
