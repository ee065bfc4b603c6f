# debug.py
from __future__ import annotations
import logging
from typing import Dict

from errors import ConfigError

COMPONENTS = ("stepping", "encipher", "config")


class Debug:
    """Per-component switches over the shared ``ENIGMA`` logger.

    Every component starts silent; ``main.py --verbose`` opts in.  The
    root logger is configured once, however many instances exist.
    """

    _root_configured: bool = False

    def __init__(self) -> None:
        if not Debug._root_configured:
            logging.basicConfig(
                level=logging.DEBUG,
                format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            Debug._root_configured = True

        self.logger = logging.getLogger("ENIGMA")
        self.components: Dict[str, bool] = dict.fromkeys(COMPONENTS, False)

    def log(self, component: str, message: str) -> None:
        if self.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    def enable(self, *components: str) -> None:
        self._switch(components, True)

    def disable(self, *components: str) -> None:
        self._switch(components, False)

    def status(self) -> Dict[str, bool]:
        return self.components.copy()

    # unknown names fail before any switch flips
    def _switch(self, components: tuple[str, ...], state: bool) -> None:
        unknown = [c for c in components if c not in self.components]
        if unknown:
            raise ConfigError(f"No such debug component: {', '.join(unknown)}")
        for c in components:
            self.components[c] = state

    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug active={active}>"
