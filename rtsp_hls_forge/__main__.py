from __future__ import annotations

import sys

from rtsp_hls_forge.cli import main

if __name__ == "__main__":
    sys.exit(main())
