# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Main entrypoint when running with `python -m agentforce`.
"""

import sys

from .src.cli import main

if __name__ == "__main__":
    sys.exit(main())
