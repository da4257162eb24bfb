"""Test the override store and the pruning of redundant entries."""

import logging

import pytest

from crabapi.codegen.overrides import OverrideFile, OverrideStore, PathOverride
from crabapi.exceptions import OverrideFileError

USERS = '/admin/realms/{realm}/users'

PATCH = '''\
[path."/admin/realms/{realm}/users:get:"]
from_type = "TypeVec<OldUser>"
rust_type = "TypeVec<UserRepresentation>"

[path."/admin/realms/{realm}/users:get:max"]
from_type = "Option<i32>"
rust_type = "Option<u32>"

[type."UserRepresentation:attributes"]
rust_type = "TypeMap<String, TypeVec<String>>"
'''


@pytest.fixture
def patch_file(tmp_path):
    path = tmp_path / 'openapi.patch.toml'
    path.write_text(PATCH, encoding='utf-8')
    return path


class TestLoad:
    """Test loading of the patch file."""

    def test_no_path(self):
        """Without a path the store is empty."""
        store = OverrideStore.load(None)
        assert store.lookup_path(USERS, 'get') is None
        assert store.flush() == 0

    def test_load(self, patch_file):
        """Both tables are parsed."""
        store = OverrideStore.load(patch_file)
        entry = store.lookup_path(USERS, 'get', 'max')
        assert entry.rust_type == 'Option<u32>'
        assert store.lookup_field('UserRepresentation', 'attributes') is not None
        assert store.lookup_field('UserRepresentation', 'id') is None

    def test_missing_file(self, tmp_path):
        """A configured file that does not exist is fatal."""
        with pytest.raises(OverrideFileError):
            OverrideStore.load(tmp_path / 'missing.toml')

    def test_invalid_toml(self, tmp_path):
        """Unparseable TOML is fatal."""
        path = tmp_path / 'broken.toml'
        path.write_text('[path\nrust_type = ', encoding='utf-8')
        with pytest.raises(OverrideFileError):
            OverrideStore.load(path)

    def test_invalid_shape(self, tmp_path):
        """Entries without the required keys are fatal."""
        path = tmp_path / 'shape.toml'
        path.write_text('[path."/x:get:"]\nrust_type = "A"\n', encoding='utf-8')
        with pytest.raises(OverrideFileError):
            OverrideStore.load(path)


class TestKeys:
    """Test table keys and headers."""

    def test_path_header(self):
        """Path entries are keyed route:verb:parameter."""
        assert OverrideStore.path_header(USERS, 'get') == f'[path."{USERS}:get:"]'
        assert OverrideStore.path_key(USERS, 'get', 'max') == f'{USERS}:get:max'

    def test_field_header(self):
        """Type entries are keyed Struct:member."""
        assert OverrideStore.field_header('User', 'id') == '[type."User:id"]'


class TestResolve:
    """Test override resolution."""

    def test_no_entry(self):
        """Without an entry the inferred type is kept."""
        store = OverrideStore()
        assert store.resolve_path_type(USERS, 'get', 'max', 'Option<i32>') == 'Option<i32>'
        assert store.resolve_field_type('User', 'id', 'Option<TypeString>') == 'Option<TypeString>'

    def test_matching_entry(self, patch_file):
        """An entry whose from_type still matches is applied and kept."""
        store = OverrideStore.load(patch_file)
        assert store.resolve_path_type(USERS, 'get', 'max', 'Option<i32>') == 'Option<u32>'
        assert store.pending == []

    def test_redundant_entry(self, patch_file):
        """An entry whose rust_type is what inference now yields is queued."""
        store = OverrideStore.load(patch_file)
        result = store.resolve_path_type(USERS, 'get', None, 'TypeVec<UserRepresentation>')
        assert result == 'TypeVec<UserRepresentation>'
        assert store.pending == [f'[path."{USERS}:get:"]']

    def test_redundant_field(self, patch_file):
        """A field override equal to the inferred type is queued."""
        store = OverrideStore.load(patch_file)
        store.resolve_field_type(
            'UserRepresentation', 'attributes', 'TypeMap<String, TypeVec<String>>'
        )
        assert store.pending == ['[type."UserRepresentation:attributes"]']

    def test_drift_warning(self, caplog):
        """A stale from_type with a different rust_type is reported."""
        store = OverrideStore(
            OverrideFile(path={'/x:get:': PathOverride(from_type='A', rust_type='B')})
        )
        with caplog.at_level(logging.WARNING, logger='crabapi.codegen.overrides'):
            assert store.resolve_path_type('/x', 'get', None, 'C') == 'B'
        assert 'type info changed in [path."/x:get:"] : was A now C (mapped B)' in caplog.text
        assert store.pending == []


class TestPrune:
    """Test rewriting of the patch file."""

    def test_flush_removes_redundant_tables(self, patch_file):
        """Redundant tables are removed; the others survive unchanged."""
        store = OverrideStore.load(patch_file)
        store.resolve_path_type(USERS, 'get', None, 'TypeVec<UserRepresentation>')
        store.resolve_path_type(USERS, 'get', 'max', 'Option<i32>')

        assert store.flush() == 1

        content = patch_file.read_text(encoding='utf-8')
        assert f'[path."{USERS}:get:"]' not in content
        assert 'TypeVec<OldUser>' not in content
        assert f'[path."{USERS}:get:max"]' in content
        assert 'rust_type = "Option<u32>"' in content
        assert '[type."UserRepresentation:attributes"]' in content
        assert OverrideStore.load(patch_file).lookup_path(USERS, 'get') is None

    def test_flush_once(self, patch_file):
        """The queue is emptied by a flush."""
        store = OverrideStore.load(patch_file)
        store.mark_redundant('[type."UserRepresentation:attributes"]')
        store.mark_redundant('[type."UserRepresentation:attributes"]')
        assert store.pending == ['[type."UserRepresentation:attributes"]']
        assert store.flush() == 1
        assert store.flush() == 0

    def test_nothing_to_prune(self, patch_file):
        """The file is left untouched when nothing is redundant."""
        store = OverrideStore.load(patch_file)
        store.resolve_path_type(USERS, 'get', 'max', 'Option<i32>')
        assert store.flush() == 0
        assert patch_file.read_text(encoding='utf-8') == PATCH

    def test_commented_header(self, tmp_path):
        """Headers with comments or extra spacing are still recognised."""
        path = tmp_path / 'openapi.patch.toml'
        path.write_text(
            f'[ path."{USERS}:get:" ]  # pinned while upstream is wrong\n'
            'from_type = "TypeVec<OldUser>"\n'
            'rust_type = "TypeVec<UserRepresentation>"\n'
            '\n'
            '[type."UserRepresentation:attributes"]\n'
            'rust_type = "TypeMap<String, TypeVec<String>>"\n',
            encoding='utf-8',
        )
        store = OverrideStore.load(path)
        store.resolve_path_type(USERS, 'get', None, 'TypeVec<UserRepresentation>')

        assert store.flush() == 1

        content = path.read_text(encoding='utf-8')
        assert 'TypeVec<OldUser>' not in content
        assert content.startswith('[type."UserRepresentation:attributes"]\n')

    def test_missing_header_warning(self, patch_file, caplog):
        """Queued headers absent from the file are reported."""
        store = OverrideStore.load(patch_file)
        store.mark_redundant('[type."Group:name"]')
        with caplog.at_level(logging.WARNING, logger='crabapi.codegen.overrides'):
            assert store.flush() == 0
        assert 'Redundant override [type."Group:name"] not found' in caplog.text
        assert patch_file.read_text(encoding='utf-8') == PATCH

    def test_prune_without_file(self):
        """A store without a backing file has nothing to rewrite."""
        store = OverrideStore()
        store.mark_redundant('[type."A:b"]')
        assert store.flush() == 0
