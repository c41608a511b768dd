"""Example tool source file.

Serve it with:

    mcp-session-proxy server --tools examples/example_tools.py
"""

import random

from mcp_session_proxy import tool, type_integer, type_number


def draw_normal(n: int, mean: float = 0.0, sd: float = 1.0) -> list[float]:
    return [random.gauss(mean, sd) for _ in range(n)]


tools = [
    tool(
        draw_normal,
        "Draw numbers from a random normal distribution",
        arguments={
            "n": type_integer("The number of observations. Must be a positive integer.", minimum=1),
            "mean": type_number("The mean value of the distribution."),
            "sd": type_number(
                "The standard deviation of the distribution. Must be a non-negative number.",
                minimum=0,
            ),
        },
    ),
]
