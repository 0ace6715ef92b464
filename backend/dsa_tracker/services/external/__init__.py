from . import (
    extraction,
    leetcode,
    codeforces,
    codechef,
    geeksforgeeks,
)
from .base import PlatformAdapter
from .leetcode import LeetCodeAdapter
from .codeforces import CodeforcesAdapter
from .codechef import CodeChefAdapter
from .geeksforgeeks import GeeksForGeeksAdapter

__all__ = [
    "extraction",
    "leetcode",
    "codeforces",
    "codechef",
    "geeksforgeeks",
    "PlatformAdapter",
    "LeetCodeAdapter",
    "CodeforcesAdapter",
    "CodeChefAdapter",
    "GeeksForGeeksAdapter",
]
