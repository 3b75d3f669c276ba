"""
streamscore - algorithmic Csound scores from streams of values.

Instead of writing i-statements by hand, describe each part as a set of
streams: one for note durations, one for the delay between notes, and one
for each extra p-field. A part calls its streams over and over, building
i-statements until it reaches its end time, then prints them as a neatly
aligned Csound score table.

Streams are plain callables that receive a ``GenerationContext``, so they can
react to the current time, the statement being built, or the last delay:

    ```python
    import streamscore

    part = streamscore.Part(
        instrument_number = 1,
        start_at = 0.5,
        end_at = 10,
        durations = streamscore.streams.Counter(),
        delays = lambda context: 0.5,
        p_streams = {
            4: lambda context: context.now + 1,
            5: lambda context: 1 / context.last_statement.duration,
        },
    )

    print(part.render())
    ```

which prints::

    ;p1        p2         p3        p4         p5
    i1         0.5        1         1.5        1
    i1         2          2         3          0.5
    i1         4.5        3         5.5        0.333333333333333
    i1         8          4         9          0.25

Whole scores, with header and footer text around their parts, can be loaded
from YAML with ``Score.load()`` and rendered from the command line with
``python -m streamscore score.yaml``.

Package-level exports: ``ConfigurationError``, ``GenerationContext``,
``IStatement``, ``Part``, ``Score``, ``register_stream``.
"""

import streamscore.context
import streamscore.errors
import streamscore.part
import streamscore.score
import streamscore.statement
import streamscore.streams


ConfigurationError = streamscore.errors.ConfigurationError
GenerationContext = streamscore.context.GenerationContext
IStatement = streamscore.statement.IStatement
Part = streamscore.part.Part
Score = streamscore.score.Score
register_stream = streamscore.streams.register_stream
