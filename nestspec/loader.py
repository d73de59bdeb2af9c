"""Loading of spec files from disk."""

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)


class SpecLoadError(Exception):
    """Raised when a spec file can't be found or fails while declaring."""
    pass


def load_spec_file(path: str) -> ModuleType:
    """Import a spec file so its declarations register with the default builder."""
    spec_path = Path(path)
    if not spec_path.is_file():
        raise SpecLoadError(f"Spec file not found: {path}")

    module_name = f"nestspec_spec_{spec_path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, spec_path)
    if spec is None or spec.loader is None:
        raise SpecLoadError(f"Cannot load {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    # Helpers next to the spec file are importable while it declares
    spec_dir = str(spec_path.resolve().parent)
    sys.path.insert(0, spec_dir)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise SpecLoadError(f"Error while loading {path}: {e}") from e
    finally:
        sys.path.remove(spec_dir)

    logger.debug(f"Loaded spec file {spec_path}")
    return module
