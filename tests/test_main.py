"""Tests for the command-line entry point."""

import pytest

import main


class TestMain:
    """Test the CLI end to end on tiny renders."""

    def test_renders_ppm(self, tmp_path, capsys):
        out = tmp_path / "render.ppm"
        status = main.main([
            '--scene', 'two-spheres', '--width', '8', '--samples', '1', '--depth', '3',
            '--threads', '1', '--seed', '4', '--output', str(out),
        ])
        assert status == 0
        lines = out.read_text().splitlines()
        assert lines[0] == "P3"
        width, height = map(int, lines[1].split())
        assert width == 8
        assert len(lines) == 3 + width * height
        assert "Saved to" in capsys.readouterr().out

    def test_same_seed_same_file(self, tmp_path):
        args = ['--scene', 'showcase', '--width', '6', '--samples', '2', '--depth', '4',
                '--threads', '2', '--seed', '11']
        first, second = tmp_path / "a.ppm", tmp_path / "b.ppm"
        assert main.main(args + ['--output', str(first)]) == 0
        assert main.main(args + ['--output', str(second)]) == 0
        assert first.read_text() == second.read_text()

    def test_creates_output_directory(self, tmp_path):
        out = tmp_path / "nested" / "dir" / "render.png"
        status = main.main(['--scene', 'two-spheres', '--width', '4', '--samples', '1',
                            '--threads', '1', '--output', str(out)])
        assert status == 0
        assert out.exists()

    def test_invalid_options_exit_code(self, tmp_path, capsys):
        status = main.main(['--scene', 'two-spheres', '--samples', '0',
                            '--output', str(tmp_path / "x.ppm")])
        assert status == 2
        assert "samples_per_pixel" in capsys.readouterr().err
        assert not (tmp_path / "x.ppm").exists()

    def test_write_failure_exit_code(self, tmp_path, capsys):
        status = main.main(['--scene', 'two-spheres', '--width', '4', '--samples', '1',
                            '--threads', '1', '--output', str(tmp_path / "render.bogus")])
        assert status == 1
        assert "Cannot write image" in capsys.readouterr().err

    def test_unknown_scene_rejected(self):
        with pytest.raises(SystemExit):
            main.main(['--scene', 'cornell'])

    def test_uncreatable_output_directory_exit_code(self, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        status = main.main(['--scene', 'two-spheres', '--width', '4', '--samples', '1',
                            '--threads', '1', '--output', str(blocker / "render.ppm")])
        assert status == 1
        captured = capsys.readouterr()
        assert "Cannot create output directory" in captured.err
        assert "Rendering:" not in captured.out
