import numpy as np
import pytest

from imgproc import cli
from imgproc.helpers import load_image_rgb, save_image


@pytest.fixture
def infile(tmp_path, rgb_image):
    path = tmp_path / "in.png"
    save_image(rgb_image, path)
    return path


def test_generate_end_to_end(tmp_path, capsys):
    out = tmp_path / "out.png"
    assert cli.main(["generate", str(out)]) == 0
    assert f"Wrote: {out}" in capsys.readouterr().out

    img = load_image_rgb(out)
    assert img.shape == (800, 800, 3)
    assert tuple(img[100, 100]) == (107, 107, 115)


def test_fractal_end_to_end(tmp_path):
    out = tmp_path / "fractal.png"
    assert cli.main(["fractal", str(out)]) == 0
    img = load_image_rgb(out)
    assert img.shape == (800, 800, 3)
    assert tuple(img[0, 0]) == (0, 0, 0)


@pytest.mark.parametrize(
    "argv",
    [
        ["--invert", "transform", "{in}", "{out}"],
        ["transform", "{in}", "{out}", "--invert"],
        ["transform", "{in}", "{out}", "-i"],
    ],
)
def test_transform_flags_before_or_after_subcommand(tmp_path, infile, rgb_image, argv):
    out = tmp_path / "out.png"
    argv = [a.format(**{"in": infile, "out": out}) for a in argv]
    assert cli.main(argv) == 0
    assert np.array_equal(load_image_rgb(out), 255 - rgb_image)


def test_transform_all_flags(tmp_path, infile, rgb_image):
    out = tmp_path / "out.png"
    argv = ["--brighten", "10", "transform", str(infile), str(out),
            "--crop", "0,0,4,1", "--rotate", "90", "--grayscale", "--blur", "0.5"]
    assert cli.main(argv) == 0
    img = load_image_rgb(out)
    # grayscale output is stored single-channel, decoded back as RGB
    assert img.shape == (4, 1, 3)


def test_transform_rotate_45_is_noop(tmp_path, infile, rgb_image):
    out = tmp_path / "out.png"
    assert cli.main(["--rotate", "45", "transform", str(infile), str(out)]) == 0
    assert np.array_equal(load_image_rgb(out), rgb_image)


def test_crop_out_of_bounds_leaves_no_file(tmp_path, infile, capsys):
    out = tmp_path / "out.png"
    assert cli.main(["--crop", "2,0,10,1", "transform", str(infile), str(out)]) == 1
    assert not out.exists()
    assert "error:" in capsys.readouterr().err


def test_missing_input_is_reported(tmp_path, capsys):
    out = tmp_path / "out.png"
    assert cli.main(["transform", str(tmp_path / "missing.png"), str(out)]) == 1
    assert "Could not read image" in capsys.readouterr().err
    assert not out.exists()


def test_unwritable_output_is_reported(tmp_path, capsys):
    out = tmp_path / "no-such-dir" / "out.png"
    assert cli.main(["generate", str(out)]) == 1
    assert "Failed writing" in capsys.readouterr().err


def test_missing_subcommand_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["generate", "fractal"])
def test_transform_flags_rejected_for_generators(tmp_path, capsys, command):
    out = tmp_path / "out.png"
    assert cli.main(["--invert", "--brighten", "0", command, str(out)]) == 2
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "--brighten" in err and "--invert" in err
    assert not out.exists()


def test_transform_flag_after_generator_is_rejected(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["generate", str(tmp_path / "out.png"), "--invert"])
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "crop, message",
    [("1,2,3", "Invalid crop value: 1,2,3"), ("1,2,x,4", "Invalid width value: x")],
)
def test_bad_crop_names_field(tmp_path, infile, capsys, crop, message):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--crop", crop, "transform", str(infile), str(tmp_path / "out.png")])
    assert exc.value.code == 2
    assert message in capsys.readouterr().err


@pytest.mark.parametrize("sigma", ["0", "-1", "abc", "inf", "nan"])
def test_bad_blur_is_usage_error(tmp_path, infile, sigma):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--blur", sigma, "transform", str(infile), str(tmp_path / "out.png")])
    assert exc.value.code == 2


def test_show_previews_result(tmp_path, monkeypatch):
    shown = []
    monkeypatch.setattr(cli.Visualizer, "show_image", lambda img, title: shown.append((img.shape, title)))
    out = tmp_path / "out.png"
    assert cli.main(["--show", "generate", str(out)]) == 0
    assert shown == [((800, 800, 3), str(out))]


def test_empty_crop_then_rotate_is_reported(tmp_path, infile, capsys):
    out = tmp_path / "out.png"
    assert cli.main(["--crop", "0,0,0,0", "--rotate", "90", "transform", str(infile), str(out)]) == 1
    assert "zero width or height" in capsys.readouterr().err
    assert not out.exists()


@pytest.mark.parametrize("flag", ["--brighten", "--rotate"])
def test_out_of_range_integers_are_usage_errors(tmp_path, infile, capsys, flag):
    with pytest.raises(SystemExit) as exc:
        cli.main([flag, "3000000000", "transform", str(infile), str(tmp_path / "out.png")])
    assert exc.value.code == 2
    assert "out of 32-bit range" in capsys.readouterr().err


def test_brighten_at_i32_limit_saturates(tmp_path, infile, rgb_image):
    out = tmp_path / "out.png"
    assert cli.main(["--brighten", str(2**31 - 1), "transform", str(infile), str(out)]) == 0
    assert (load_image_rgb(out) == 255).all()
