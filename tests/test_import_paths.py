from __future__ import annotations


def test_package_paths_work() -> None:
    from implview.api import create_api_app
    from implview.api.routes import mount_implementors_api
    from implview.core import STORE, HostContext, ImplementorStore, publish
    from implview.io import dump_implementors_js, load_docs_tree, parse_implementors_js
    from implview.runtime import ImplviewServer, create_app, run
    from implview.sdk import ImplviewClient, ImplviewClientError

    assert create_api_app is not None
    assert mount_implementors_api is not None
    assert isinstance(STORE, ImplementorStore)
    assert HostContext is not None
    assert publish is not None
    assert dump_implementors_js is not None
    assert parse_implementors_js is not None
    assert load_docs_tree is not None
    assert ImplviewServer is not None
    assert create_app is not None
    assert run is not None
    assert ImplviewClient is not None
    assert issubclass(ImplviewClientError, RuntimeError)


def test_top_level_exports() -> None:
    import implview

    for name in implview.__all__:
        assert getattr(implview, name) is not None


def test_module_docstrings_are_set() -> None:
    import implview.core.host as host
    import implview.io.jsdata as jsdata

    assert host.__doc__ is not None and "pending slot" in host.__doc__
    assert jsdata.__doc__ is not None and "var implementors" in jsdata.__doc__
