import importlib

from deadstock.models.session_entry import SessionEntry


def import_all_models() -> None:
    for module_name in ("deadstock.models.session_entry",):
        importlib.import_module(module_name)


__all__ = ["SessionEntry", "import_all_models"]
