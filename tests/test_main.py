import pytest

from mandelbrot_playground.__main__ import build_parser


def test_defaults():
    args = build_parser().parse_args([])
    assert args.width is None
    assert args.max_iter is None
    assert not args.verbose


def test_overrides():
    args = build_parser().parse_args(
        ['--width', '640', '--height', '480', '--max-iter', '200',
         '--palette', 'Hue Rotation', '--window', 'offset', '-v']
    )
    assert (args.width, args.height, args.max_iter) == (640, 480, 200)
    assert args.palette == 'Hue Rotation'
    assert args.window == 'offset'
    assert args.verbose


def test_unknown_palette_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(['--palette', 'Rainbow'])
