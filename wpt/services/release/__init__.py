"""Release to the wp.org SVN repository.

- params: resolve CLI overrides + .wpt.yml into ReleaseParams
- diff / sync: mirror the local build into the SVN working copy
- pipeline: ordered release stages and the driver that runs them
"""

from __future__ import annotations
