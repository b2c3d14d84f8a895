"""
CouchStore - Quick Start Example
Run this example against a local CouchDB to test your setup
"""

from couchstore import CouchSource, Model
from couchstore.exceptions import CouchStoreError

def main():
    """Quick start example"""

    # ============================================
    # STEP 1: Connect
    # ============================================
    print("CouchStore Quick Start\n")

    source = CouchSource({"host": "localhost", "port": 5984, "user": "admin", "pass": "admin"})

    if not source.connected:
        print("No CouchDB server at", source.config.display_url)
        return

    print("Databases:", ", ".join(source.list_sources()), "\n")

    try:
        # ============================================
        # STEP 2: Create
        # ============================================
        created = source.create("posts", {
            "title": "a post",
            "tags": ["intro", "couchdb"],
            "author": {"name": "someone"}
        }).raise_for_failure()
        print(f"Created {created.id} at revision {created.rev}")

        # ============================================
        # STEP 3: Update
        # ============================================
        updated = source.update("posts", {"id": created.id, "title": "an edited post"})
        print(f"Updated to revision {updated.rev}")

        post = Model("posts", data={"id": "welcome", "title": "hello"})
        source.create(post)

        # ============================================
        # STEP 4: Read
        # ============================================
        for row in source.read("posts", ["_all_docs"]).rows:
            print(" -", row["id"])

        # ============================================
        # STEP 5: Delete
        # ============================================
        source.delete("posts", created.id)
        gone = source.read("posts", [created.id])
        print(f"After delete: {gone.error} ({gone.reason})")

    except CouchStoreError as e:
        print(f"Error: {e.message}")

    finally:
        source.close()

if __name__ == "__main__":
    main()
