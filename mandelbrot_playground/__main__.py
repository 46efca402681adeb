"""
Allow running the package directly: python -m mandelbrot_playground
"""
import logging
from argparse import ArgumentParser

from .colormaps import list_palette_names
from .config import clamp_iterations, load_settings
from .viewport import ASPECT_WINDOWS


def build_parser():
    parser = ArgumentParser(prog='mandelbrot_playground',
                            description='Interactive Mandelbrot set playground.')

    parser.add_argument('--settings', type=str, dest='settings',
                        help='JSON settings file to use instead of the packaged one',
                        metavar='PATH')
    parser.add_argument('--width', type=int, dest='width',
                        help='width of the fractal image in pixels', metavar='WIDTH')
    parser.add_argument('--height', type=int, dest='height',
                        help='height of the fractal image in pixels', metavar='HEIGHT')
    parser.add_argument('--max-iter', type=int, dest='max_iter',
                        help='initial (and reset) maximum iteration count', metavar='MAX_ITER')
    parser.add_argument('--palette', choices=list_palette_names(), dest='palette',
                        help='initial color scheme')
    parser.add_argument('--window', choices=sorted(ASPECT_WINDOWS), dest='window',
                        help='pixel-to-plane mapping preset')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if opt.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    settings = load_settings(opt.settings)
    if opt.width is not None:
        if opt.width <= 0:
            parser.error('--width must be positive')
        settings['window_width'] = opt.width
    if opt.height is not None:
        if opt.height <= 0:
            parser.error('--height must be positive')
        settings['window_height'] = opt.height
    if opt.max_iter is not None:
        settings['default_max_iterations'] = clamp_iterations(opt.max_iter, settings)
    if opt.palette is not None:
        settings['default_palette'] = opt.palette
    if opt.window is not None:
        settings['aspect_window'] = opt.window

    # pygame is only needed for the window itself
    from .app import run
    run(settings)


if __name__ == "__main__":
    main()
