"""
Dice notation language: parse "3d6kh2!=6+1d4-3" into a roll tree and evaluate it.

For the parser see dicelang/grammar.py, for evaluation dicelang/evaluator.py.
"""
from __future__ import absolute_import, print_function
import sys

__version__ = '0.1.0'

try:
    assert sys.version_info[0:2] >= (3, 6)
except AssertionError:
    print('This entire program must be run with python >= 3.6')
    print('If unavailable on platform, see https://github.com/pyenv/pyenv')
    sys.exit(1)
