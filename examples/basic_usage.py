#!/usr/bin/env python
"""
Basic usage example for H5P-Store.

This script demonstrates how to:
1. Initialize a FileContentStorage
2. Create a content object
3. Attach files to it
4. Read content and files back
5. Delete the content
"""

import io
import os
import shutil
import logging
import tempfile

from h5p_store import FileContentStorage, NotFoundError, User


def create_sample_content():
    """Create sample metadata and parameters for demonstration."""
    metadata = {
        "title": "Capital cities",
        "language": "en",
        "mainLibrary": "H5P.MultiChoice",
        "embedTypes": ["div"],
        "preloadedDependencies": [
            {"machineName": "H5P.MultiChoice", "majorVersion": 1, "minorVersion": 16}
        ]
    }
    parameters = {
        "question": "<p>What is the capital of France?</p>",
        "answers": [
            {"text": "Paris", "correct": True},
            {"text": "Lyon", "correct": False}
        ],
        "media": {"type": {"params": {"file": {"path": "images/paris.png"}}}}
    }
    return metadata, parameters


def main():
    """Main function demonstrating H5P-Store usage."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Create a temporary directory for storage
    storage_path = tempfile.mkdtemp()
    print(f"Using temporary storage path: {storage_path}")

    try:
        storage = FileContentStorage(storage_path)
        user = User(id="1", name="Demo User", email="demo@example.com")

        print("\nCreating content...")
        metadata, parameters = create_sample_content()
        content_id = storage.create_content(metadata, parameters, user)
        print(f"Created content with id {content_id}")

        print("\nAttaching files...")
        storage.add_content_file(content_id, "images/paris.png", io.BytesIO(b"\x89PNG" + b"\x00" * 60), user)
        storage.add_content_file(content_id, "audio/question.mp3", io.BytesIO(b"ID3" + b"\x00" * 120), user)

        print(f"Files: {sorted(storage.get_content_files(content_id, user))}")
        for filename in storage.get_content_files(content_id, user):
            stats = storage.get_content_file_stats(content_id, filename, user, with_checksum=True)
            print(f"  {stats.path}: {stats.size} bytes, checksum {stats.checksum}")

        with storage.get_content_file_stream(content_id, "images/paris.png", user) as f:
            print(f"First bytes of the image: {f.read(4)!r}")

        print(f"\nTitle: {storage.get_metadata(content_id, user)['title']}")
        print(f"Question: {storage.get_parameters(content_id, user)['question']}")
        print(f"Permissions: {[p.value for p in storage.get_user_permissions(content_id, user)]}")

        # Show storage directory structure
        print("\nStorage directory structure:")
        for root, dirs, files in os.walk(storage_path):
            level = root.replace(storage_path, '').count(os.sep)
            indent = ' ' * 4 * level
            print(f"{indent}{os.path.basename(root)}/")
            sub_indent = ' ' * 4 * (level + 1)
            for f in files:
                print(f"{sub_indent}{f}")

        print("\nDeleting content...")
        storage.delete_content(content_id, user)
        print(f"Content exists: {storage.content_exists(content_id)}")

        try:
            storage.get_content_file_stream(content_id, "../../etc/passwd", user)
        except NotFoundError as e:
            print(f"Path traversal rejected: {e}")

        print("\nBasic usage demo completed successfully!")

    finally:
        # Clean up the temporary directory
        print(f"\nCleaning up temporary storage: {storage_path}")
        shutil.rmtree(storage_path)


if __name__ == "__main__":
    main()
