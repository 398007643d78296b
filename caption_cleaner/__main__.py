"""Package entry point for ``python -m caption_cleaner``.

WHY: Users run the cleaner as ``python -m caption_cleaner captions.vtt``
for CLI mode, or ``python -m caption_cleaner --serve`` to start the HTTP
API without installing the console scripts.

RULES:
- ``--serve`` starts the FastAPI app under uvicorn
- Without ``--serve``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from caption_cleaner.server.app import run_api
        run_api()
    else:
        from caption_cleaner.cli import main
        main()
