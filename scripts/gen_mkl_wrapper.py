#!/usr/bin/env python3
"""
gen_mkl_wrapper.py - MKL dispatch wrapper generator entry point

Generates Rust, C++ or Go wrappers that dispatch MKL routines on precision.

Usage:
    python scripts/gen_mkl_wrapper.py -i funcs.txt -o mkl.rs [--for-cc | --for-go]
"""

import os
import sys

# Add scripts directory to path
script_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, script_dir)

from dispatch_gen.cli import main


if __name__ == '__main__':
    sys.exit(main())
