"""
File intake validation.

Classifies candidates against the per-file size ceiling. Oversized files
stay in the candidate set, they are only excluded from submission.
"""

from typing import Dict, Iterable, Tuple

from ..domain.files import MIB, CandidateSet, FileCandidate, OversizeSummary

DEFAULT_MAX_FILE_SIZE = 20 * MIB


class FileIntakeValidator:
    """Pure operations over a candidate set and a size ceiling."""

    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        if max_file_size <= 0:
            raise ValueError(f"max_file_size must be positive, got {max_file_size}")
        self._max_file_size = max_file_size

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    @property
    def limit_label(self) -> str:
        """The ceiling as shown to users, e.g. ``20MB``."""
        if self._max_file_size % MIB == 0:
            return f"{self._max_file_size // MIB}MB"
        return f"{self._max_file_size / MIB:.2f}MB"

    def is_oversized(self, candidate: FileCandidate) -> bool:
        return candidate.size_bytes > self._max_file_size

    def classify(self, candidate: FileCandidate) -> Dict[str, bool]:
        return {"oversized": self.is_oversized(candidate)}

    def add(self, candidates: CandidateSet, incoming: Iterable[FileCandidate]) -> CandidateSet:
        return candidates.extend(incoming)

    def remove(self, candidates: CandidateSet, index: int) -> CandidateSet:
        return candidates.without(index)

    def eligible(self, candidates: CandidateSet) -> Tuple[FileCandidate, ...]:
        """Candidates that will actually be sent."""
        return tuple(f for f in candidates if not self.is_oversized(f))

    def summarize(self, candidates: CandidateSet) -> OversizeSummary:
        rejected = tuple(f for f in candidates if self.is_oversized(f))
        if not rejected:
            return OversizeSummary()
        return OversizeSummary(
            oversized_count=len(rejected),
            message=(
                f"Some files exceed the {self.limit_label} limit, "
                "remove them to continue"
            ),
            rejected=rejected
        )
