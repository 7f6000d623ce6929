"""Reporter plugin descriptor."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from autograding_action.reporting.base import Reporter


@dataclass(frozen=True, kw_only=True)
class ReporterManifest[ConfigT: BaseModel]:
    """How to configure a reporter and how to open it.

    Entry points in the ``autograding_action.reporters`` group resolve to
    instances of this class; importing one must not touch the network or
    the environment.
    """

    config_cls: type[ConfigT]
    reporter_factory: Callable[[ConfigT], AbstractAsyncContextManager[Reporter]]

    def parse_config(self, raw: str) -> ConfigT:
        """Validate reporter settings given as a JSON object.

        Raises:
            ValueError: If the text is not JSON or does not fit config_cls

        """
        return self.config_cls.model_validate_json(raw)

    def open(self, config: ConfigT) -> AbstractAsyncContextManager[Reporter]:
        return self.reporter_factory(config)
