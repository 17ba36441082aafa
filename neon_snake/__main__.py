import argparse
import logging
import os

from .config import DATA_DIR, FPS


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="neon-snake", description="Neon Snake")
    parser.add_argument("--fps", type=int, default=FPS, help="frames drawn per second")
    parser.add_argument("--mute", action="store_true", help="disable sound effects")
    parser.add_argument("--data-dir", default=str(DATA_DIR), help="where the best score is kept")
    parser.add_argument("--headless", action="store_true", help="use dummy video and audio drivers")
    parser.add_argument("--frames", type=int, default=None, help="quit after this many frames")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)
    if args.fps <= 0:
        parser.error("--fps must be positive")
    return args


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # SDL reads these when pygame initialises
    if args.headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        os.environ["SDL_AUDIODRIVER"] = "dummy"

    from .app import Game

    game = Game(fps=args.fps, muted=args.mute, data_dir=args.data_dir)
    game.run(max_frames=args.frames)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
