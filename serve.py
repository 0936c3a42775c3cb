"""Run the Font Gateway HTTP server.

    python serve.py [port]

Loads GOOGLE_FONTS_API_KEY from .env, fetches the Google Fonts catalog and
serves GET /fonts on port 8080 (or the given port). Same startup path as
``fontgate serve``; fails if the env file or the catalog cannot be loaded.
"""

import sys

from fontgate.cli import cli


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    args = ["serve"]
    if argv:
        args += ["--port", argv[0]]
    cli.main(args=args, prog_name="serve.py", obj={})


if __name__ == "__main__":
    main()
