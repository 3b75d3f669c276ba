"""Minimal score: one part of one-second notes a second apart."""

import sys

import streamscore


SCORE = """\
---
parts:
    - instrument_number: 1
      end_at: 10
      durations:
          constant: 1
      delays:
          constant: 1
"""


if __name__ == "__main__":
	sys.stdout.write(streamscore.Score.load(SCORE).render())
