#!/usr/bin/env python3
"""
run.py - Entry point for networked Connect Four

Examples:
    python run.py host --port 4000
    python run.py join --address 192.168.1.20 --port 4000 --player computer
"""

import sys

from connect4net.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
