"""
Candidate release versions.

The sequence for a base version ``B`` is ``B, B.1, B.2, ...`` or, when the
repeat count is always included, ``B.0, B.1, B.2, ...``. It has no end; the
tag collision resolver stops drawing once a candidate is free.
"""


def candidate_version(base_version: str, index: int, always_include_repeat_count: bool = False) -> str:
    """
    Return the candidate version at a given position of the sequence.

    Args:
        base_version: Release base version, e.g. "1.57"
        index: Zero-based position in the sequence
        always_include_repeat_count: Append ".0" to the first candidate as well

    Returns:
        str: Candidate version string
    """
    if index < 0:
        raise ValueError(f'Candidate index must be non-negative (got: {index})')
    if index == 0 and not always_include_repeat_count:
        return base_version
    return f'{base_version}.{index}'


class CandidateVersionGenerator:
    """Draws candidate versions in order; each instance owns its repeat counter."""

    def __init__(self, base_version: str, always_include_repeat_count: bool = False):
        self.base_version = base_version
        self.always_include_repeat_count = always_include_repeat_count
        self._repeat_index = 0

    @property
    def repeat_index(self) -> int:
        """Index of the next candidate to be drawn."""
        return self._repeat_index

    def next(self) -> str:
        version = candidate_version(self.base_version, self._repeat_index, self.always_include_repeat_count)
        self._repeat_index += 1
        return version

    def __iter__(self):
        return self

    def __next__(self) -> str:
        return self.next()
