"""LearnWithMe client.

Course catalog, enrollment, and watch-progress tracking on top of the
LearnWithMe GraphQL backend.
"""

from learnwithme.app import LearnWithMe


__version__ = "0.1.0"

__all__ = ["LearnWithMe", "__version__"]
