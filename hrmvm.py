#!/usr/bin/env python3
"""
hrmvm - HRM virtual machine launcher

Usage:
    python hrmvm.py <room> [--inbox V ...] [--interactive] [--trace]
    python hrmvm.py --list

Same as the installed `hrmvm` command; see hrm_vm/cli.py.
"""

import os
import sys

# Allow running from the project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from hrm_vm.cli import main

if __name__ == "__main__":
    sys.exit(main())
