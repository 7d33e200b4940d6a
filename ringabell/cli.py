"""
Command line entry point.

Usage:
    python -m ringabell match --songs songs/ --query clip.wav
    python -m ringabell fingerprint song.wav --plot-dir plots/
    python -m ringabell serve --port 8000
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .audio_fingerprinter import Recognizer
from .config import load_config
from .exceptions import RingabellError
from .log import setup_logging

logger = logging.getLogger(__name__)


def _wav_files(folder: Path) -> List[Path]:
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == ".wav")


def cmd_match(args, config) -> int:
    recognizer = Recognizer(config=config)

    songs_dir = Path(args.songs)
    if not songs_dir.is_dir():
        print(f"Error: songs directory not found: {songs_dir}", file=sys.stderr)
        return 1

    for path in _wav_files(songs_dir):
        logger.info("Registering %s", path.name)
        try:
            recognizer.register(path.name, path.read_bytes())
        except RingabellError as e:
            logger.error("Skipping %s: %s", path.name, e)

    status = 0
    for query in args.query:
        path = Path(query)
        try:
            result = recognizer.search_result(path.read_bytes())
        except (OSError, RingabellError) as e:
            logger.error("Could not search %s: %s", path, e)
            status = 1
            continue
        print(json.dumps({"query": path.name, **result.model_dump(by_alias=True)}))
    return status


def cmd_fingerprint(args, config) -> int:
    recognizer = Recognizer(config=config)
    fp = recognizer.fingerprinter

    audio = fp.read_audio(Path(args.path).read_bytes())
    S = fp.compute_spectrogram(audio.samples, audio.sample_rate)
    peaks = fp.extract_peaks(S, audio.duration)
    hashes = fp.generate_fingerprints(peaks)

    if args.plot_dir:
        from .viz import plot_constellation, plot_spectrogram

        out = Path(args.plot_dir)
        out.mkdir(parents=True, exist_ok=True)
        plot_spectrogram(S, out / "spectrogram.png")
        plot_constellation(peaks, out / "constellation.png")

    print(json.dumps({
        "duration": audio.duration,
        "frames": len(S),
        "peaks": len(peaks),
        "fingerprints": len(hashes),
    }))
    return 0


def cmd_serve(args, config) -> int:
    import uvicorn

    from .server import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ringabell", description="Audio fingerprint matching")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML config file (default: $RINGABELL_CONFIG)")
    parser.add_argument("--min-score", type=int, default=None,
                        help="Override the match threshold")
    sub = parser.add_subparsers(dest="command", required=True)

    p_match = sub.add_parser("match", help="Register a folder of WAVs and search query clips")
    p_match.add_argument("--songs", required=True, help="Folder of WAV files to register")
    p_match.add_argument("--query", "-q", nargs="+", required=True, help="Query WAV file(s)")
    p_match.set_defaults(func=cmd_match)

    p_fp = sub.add_parser("fingerprint", help="Fingerprint one WAV and print statistics")
    p_fp.add_argument("path")
    p_fp.add_argument("--plot-dir", default=None, help="Save spectrogram/constellation plots here")
    p_fp.set_defaults(func=cmd_fingerprint)

    p_serve = sub.add_parser("serve", help="Run the HTTP server")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.min_score is not None:
        overrides["min_score"] = args.min_score
    try:
        config = load_config(args.config, **overrides)
    except RingabellError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
