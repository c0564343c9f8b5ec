import os
from unittest import mock

import numpy as np
from PIL import Image
from typer.testing import CliRunner

from cavegen.exceptions import ResourceExhaustedError
from cavegen.main import app

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestE2E:
    def setup_method(self):
        self.runner = CliRunner()

    def test_gen_map(self, tmp_path):
        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(
            app, ["gen-map", out, "--width", "40", "--height", "30", "--seed", "3"]
        )
        assert result.exit_code == 0, result.output
        with Image.open(out) as image:
            assert image.size == (320, 240)
            assert image.mode == "LA"

    def test_gen_map_is_reproducible(self, tmp_path):
        outputs = []
        for name in ("a.png", "b.png"):
            out = str(tmp_path / name)
            result = self.runner.invoke(
                app, ["gen-map", out, "--width", "32", "--height", "32", "--seed", "8"]
            )
            assert result.exit_code == 0, result.output
            with open(out, "rb") as f:
                outputs.append(f.read())
        assert outputs[0] == outputs[1]

    def test_gen_map_with_config_file(self, tmp_path):
        config = tmp_path / "cave.yaml"
        config.write_text(
            "map:\n  width: 20\n  height: 20\n  random_seed: 1\n"
            "atlas:\n  tile_size: 4\n"
        )
        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(app, ["gen-map", out, "--config", str(config)])
        assert result.exit_code == 0, result.output
        with Image.open(out) as image:
            assert image.size == (80, 80)

    def test_gen_map_with_custom_atlas(self, tmp_path):
        # Solid wall tile black, everything else transparent.
        pixels = np.zeros((18, 32, 2), dtype=np.uint8)
        pixels[16:18, 0:2] = (0, 255)
        atlas = str(tmp_path / "atlas.png")
        Image.fromarray(pixels).save(atlas)

        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(
            app,
            [
                "gen-map",
                out,
                "--atlas",
                atlas,
                "--tile-size",
                "2",
                "--width",
                "24",
                "--height",
                "24",
                "--seed",
                "2",
            ],
        )
        assert result.exit_code == 0, result.output
        with Image.open(out) as image:
            rendered = np.array(image.convert("LA"))
        assert rendered.shape == (48, 48, 2)
        # Center of the map is always open, so it keeps the white background.
        assert tuple(rendered[24, 24]) == (255, 255)
        # Corners are always walls after smoothing.
        assert tuple(rendered[0, 0]) == (0, 255)

    def test_stdout(self):
        result = self.runner.invoke(
            app, ["gen-map", "-", "--width", "10", "--height", "10", "--seed", "0"]
        )
        assert result.exit_code == 0
        assert PNG_SIGNATURE in result.stdout_bytes

    def test_refuses_to_write_to_a_terminal(self):
        with mock.patch("cavegen.main.sys") as fake_sys:
            fake_sys.stdout.isatty.return_value = True
            result = self.runner.invoke(app, ["gen-map", "-", "--width", "10"])
        assert result.exit_code == 1
        assert not fake_sys.stdout.buffer.write.called

    def test_resource_exhaustion(self, tmp_path):
        out = str(tmp_path / "cave.png")
        with mock.patch("cavegen.main.MapGen") as mapgen:
            mapgen.return_value.gen_tiles.side_effect = ResourceExhaustedError(
                "Not enough memory for 32 elements"
            )
            result = self.runner.invoke(app, ["gen-map", out, "--width", "10"])
        assert result.exit_code == 1
        assert not os.path.exists(out)

    def test_unwritable_output(self, tmp_path):
        out = str(tmp_path / "missing" / "cave.png")
        result = self.runner.invoke(
            app, ["gen-map", out, "--width", "10", "--height", "10", "--seed", "0"]
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, FileNotFoundError)
        assert not os.path.exists(out)

    def test_invalid_configuration(self, tmp_path):
        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(app, ["gen-map", out, "--width", "2"])
        assert result.exit_code == 2
        assert not os.path.exists(out)

        result = self.runner.invoke(app, ["gen-map", out, "--wall-probability", "1.5"])
        assert result.exit_code == 2
        assert not os.path.exists(out)

    def test_atlas_size_mismatch(self, tmp_path):
        atlas = str(tmp_path / "atlas.png")
        Image.new("LA", (10, 10)).save(atlas)
        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(
            app, ["gen-map", out, "--atlas", atlas, "--width", "10"]
        )
        assert result.exit_code == 1
        assert not os.path.exists(out)

    def test_missing_atlas(self, tmp_path):
        out = str(tmp_path / "cave.png")
        result = self.runner.invoke(
            app, ["gen-map", out, "--atlas", str(tmp_path / "nope.png")]
        )
        assert result.exit_code == 1
        assert not os.path.exists(out)

    def test_gen_floor(self, tmp_path):
        atlas = str(tmp_path / "floor.png")
        Image.new("LA", (64, 64), (128, 255)).save(atlas)
        out = str(tmp_path / "floor_map.png")
        result = self.runner.invoke(
            app, ["gen-floor", atlas, out, "--tile-size", "4", "--seed", "1"]
        )
        assert result.exit_code == 0, result.output
        with Image.open(out) as image:
            assert image.size == (64, 36)
            assert image.convert("LA").getpixel((0, 0)) == (128, 255)
