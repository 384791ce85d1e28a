#!/usr/bin/env python
"""
Label Print Service - Standalone Entry Point

Run directly:
    python main.py

Or with environment variables:
    LABEL_PRINT_PORT=8080 LABEL_PRINT_QUEUE_BUCKET=label-queue python main.py
"""

import os
import sys

# Ensure package is importable when running directly
if __name__ == '__main__':
    root_dir = os.path.dirname(os.path.abspath(__file__))
    if root_dir not in sys.path:
        sys.path.insert(0, root_dir)

from label_print_service.app import main


if __name__ == '__main__':
    main()
