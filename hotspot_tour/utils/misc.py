import importlib.util
import itertools
import sys
from pathlib import Path


def load_module(script_path, module_name=None):
    script_path = Path(script_path)
    if module_name is None:
        module_name = script_path.stem
    if module_name in sys.modules:
        return sys.modules[module_name]
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def incrf(start: int = 1):
    return itertools.count(start)
