import logging
import sys
from pathlib import Path

from mygit.argument_parsing import argument_parser
from mygit.config import Config, load_config
from mygit.entities.git_commit import build_commit
from mygit.entities.git_object import GitObject, ObjectType
from mygit.entities.git_tree import Tree, build_tree, format_tree
from mygit.errors import GitObjectError
from mygit.object_store import ObjectStore

_logger = logging.getLogger(__name__)

DEFAULT_BRANCH_REF = "refs/heads/master"


def create_git_dirs(target_dir: Path, git_dir_name: str = ".git") -> Path:
    # Fails if the target directory is missing or already has a metadata folder
    dot_git = target_dir / git_dir_name
    dot_git.mkdir()

    # Create the required folders
    (dot_git / "objects").mkdir()
    (dot_git / "refs").mkdir()
    (dot_git / "refs" / "heads").mkdir()

    # Create the HEAD file
    (dot_git / "HEAD").write_text(f"ref: {DEFAULT_BRANCH_REF}\n")
    return dot_git


def _write_bytes(content: bytes) -> None:
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()


def run(args, config: Config) -> None:
    store = ObjectStore(config.git_dir)

    if args.command == "init":
        dot_git = create_git_dirs(Path(args.directory), config.git_dir_name)
        print(f"Initialized git directory in {dot_git.resolve()}")
    elif args.command == "cat-file":
        git_object = store.retrieve(args.sha1)
        if args.t:
            print(git_object.object_type)
        elif args.s:
            print(len(git_object.content))
        elif git_object.object_type == ObjectType.TREE:
            for line in format_tree(Tree.from_git_object(git_object)):
                print(line)
        else:
            _write_bytes(git_object.content)
    elif args.command == "hash-object":
        with open(args.file, 'rb') as f:
            content = f.read()
        git_object = GitObject(ObjectType.BLOB, content)
        if args.w:
            store.store(git_object)
        print(git_object.object_id)
    elif args.command == "ls-tree":
        tree = Tree.from_git_object(store.retrieve(args.sha1))
        for line in format_tree(tree, name_only=args.name_only):
            print(line)
    elif args.command == "write-tree":
        object_id = build_tree(store, config.work_dir)
        print(object_id)
    elif args.command == "commit-tree":
        object_id = build_commit(store, args.tree_sha, args.p, args.m, config.author_name, config.author_email)
        print(object_id)
    else:
        raise RuntimeError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    args = argument_parser().parse_args(argv)
    config = load_config(Path())
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO)

    try:
        run(args, config)
    except (GitObjectError, OSError) as e:
        _logger.error("%s: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
