import logging

import pytest

from mygit.main import main

HELLO_BLOB_ID = 'ce013625030ba8dba906f756967f9e9ca394464a'
EMPTY_TREE_ID = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


@pytest.fixture
def repo(tmp_path, monkeypatch):
    for name in ('MYGIT_DIR', 'MYGIT_AUTHOR_NAME', 'MYGIT_AUTHOR_EMAIL', 'MYGIT_DEBUG'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    assert main(['init']) == 0
    return tmp_path


def run(capsys, *args):
    capsys.readouterr()
    status = main(list(args))
    return status, capsys.readouterr().out


def test_init_layout(repo):
    dot_git = repo / '.git'
    assert (dot_git / 'objects').is_dir()
    assert (dot_git / 'refs' / 'heads').is_dir()
    assert (dot_git / 'HEAD').read_text() == 'ref: refs/heads/master\n'


def test_init_twice_fails(repo):
    assert main(['init']) == 1


def test_init_into_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'other').mkdir()
    assert main(['init', 'other']) == 0
    assert (tmp_path / 'other' / '.git' / 'HEAD').is_file()


def test_hash_object(repo, capsys):
    (repo / 'hello.txt').write_bytes(b'hello\n')

    status, out = run(capsys, 'hash-object', 'hello.txt')
    assert (status, out) == (0, HELLO_BLOB_ID + '\n')
    assert not (repo / '.git' / 'objects' / 'ce').exists()

    status, out = run(capsys, 'hash-object', '-w', 'hello.txt')
    assert (status, out) == (0, HELLO_BLOB_ID + '\n')
    assert (repo / '.git' / 'objects' / 'ce' / HELLO_BLOB_ID[2:]).is_file()


def test_cat_file(repo, capsys):
    (repo / 'hello.txt').write_bytes(b'hello\n')
    run(capsys, 'hash-object', '-w', 'hello.txt')

    assert run(capsys, 'cat-file', '-p', HELLO_BLOB_ID) == (0, 'hello\n')
    assert run(capsys, 'cat-file', '-t', HELLO_BLOB_ID) == (0, 'blob\n')
    assert run(capsys, 'cat-file', '-s', HELLO_BLOB_ID) == (0, '6\n')


def test_cat_file_missing_object(repo, capsys, caplog):
    with caplog.at_level(logging.ERROR):
        status, out = run(capsys, 'cat-file', '-p', HELLO_BLOB_ID)
    assert status == 1
    assert out == ''
    assert HELLO_BLOB_ID in caplog.text


def test_cat_file_invalid_id(repo, capsys):
    assert run(capsys, 'cat-file', '-t', 'not-a-sha')[0] == 1


def test_write_tree_and_ls_tree(repo, capsys):
    (repo / 'hello.txt').write_text('world')
    (repo / 'hello.txt').chmod(0o644)
    (repo / 'sub').mkdir()

    status, out = run(capsys, 'write-tree')
    assert status == 0
    tree_id = out.strip()
    assert tree_id == '8b01356fc87b6229c8ff1151a7653a7ae9af5c04'

    assert run(capsys, 'ls-tree', '--name-only', tree_id) == (0, 'hello.txt\nsub\n')

    status, out = run(capsys, 'ls-tree', tree_id)
    assert out.splitlines() == [
        '100644 blob 04fea06420ca60892f73becee3614f6d023a4b7f\thello.txt',
        f'040000 tree {EMPTY_TREE_ID}\tsub',
    ]
    assert run(capsys, 'cat-file', '-p', tree_id)[1] == out


def test_ls_tree_on_blob_fails(repo, capsys):
    (repo / 'hello.txt').write_bytes(b'hello\n')
    run(capsys, 'hash-object', '-w', 'hello.txt')
    assert run(capsys, 'ls-tree', HELLO_BLOB_ID)[0] == 1


def test_commit_tree(repo, capsys, monkeypatch):
    monkeypatch.setenv('MYGIT_AUTHOR_NAME', 'Ada')
    monkeypatch.setenv('MYGIT_AUTHOR_EMAIL', 'ada@example.com')
    tree_id = run(capsys, 'write-tree')[1].strip()

    status, out = run(capsys, 'commit-tree', tree_id, '-m', 'first')
    assert status == 0
    first = out.strip()

    status, out = run(capsys, 'commit-tree', tree_id, '-p', first, '-m', 'second')
    second = out.strip()

    payload = run(capsys, 'cat-file', '-p', second)[1]
    assert payload.startswith(f'tree {tree_id}\nparent {first}\nauthor Ada <ada@example.com> ')
    assert payload.endswith('\n\nsecond')
    assert run(capsys, 'cat-file', '-t', first) == (0, 'commit\n')
