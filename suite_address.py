"""Build the harness address for a spec file."""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import quote

SUITE_PATTERN = re.compile(r"""describe\s*[("']+(.*?)["')]+""")


class SuiteAddressBuilder:
    """
    Derive the Jasmine runner URL for a target.

    The harness filters specs by the ``spec`` query parameter, so the suite name
    is taken from the first ``describe`` found at the head of the spec file.
    Passing the spec directory itself runs every suite.
    """

    def __init__(self, run_all_target: str = "spec/javascripts", logger: Optional[logging.Logger] = None):
        self.run_all_target = run_all_target
        self.logger = logger or logging.getLogger("jasmine_runner")

    def build_query(self, target: str) -> str:
        if target == self.run_all_target:
            return ""

        name = self.suite_name(target)
        if name is None:
            return ""
        return f"?spec={quote(name)}"

    def suite_name(self, target: str) -> Optional[str]:
        """Return the first suite name declared in the file, if any."""
        try:
            with open(target, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    match = SUITE_PATTERN.search(line)
                    if match:
                        return match.group(1)
        except OSError as exc:
            self.logger.debug(f"Cannot scan {target} for a suite name: {exc}")
        return None

    def build_address(self, target: str, harness_url: str) -> str:
        return harness_url + self.build_query(target)
