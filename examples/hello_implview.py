import time
from pathlib import Path

import implview

DOCS = Path(__file__).resolve().parents[1] / "tests" / "data" / "docs"


def main() -> None:
    # Loads every implementors/*.js script of the docs tree into pending slots.
    server = implview.run(port=0, docs_root=DOCS, open_browser=False, new_server=True)
    print(f"serving {DOCS} at {server.url}")

    # A trait nobody has viewed yet: the mapping waits in its pending slot.
    server.publish("core/fmt/trait.Debug", {"wasmtime": ["impl Debug for Engine"], "wiggle": []})

    time.sleep(0.5)
    client = server.client()
    for trait in client.list_traits():
        print(trait["traitPath"], "pending" if trait["pending"] else f"rev {trait['revision']}")

    # Viewing attaches the host and drains the pending slot.
    print(client.get_implementors("core/fmt/trait.Debug"))
    print(client.traits_for_crate("wasmtime"))


if __name__ == "__main__":
    main()
