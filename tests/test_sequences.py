import pytest

from keymacros.keycodes import KeyCode, describe_key, code_from_name
from keymacros.sequences import Found, KeySequence, NoPath, Partial, SequenceTrie

A, B, C, D = KeyCode.KEY_A, KeyCode.KEY_B, KeyCode.KEY_C, KeyCode.KEY_D


@pytest.fixture
def trie():
    trie = SequenceTrie()
    trie.insert(KeySequence.of(A, B, C), "echo abc")
    trie.insert(KeySequence.of(A, D), "echo ad")
    trie.insert(KeySequence.of(KeyCode.KEY_F13), "gromit-mpx -t")
    return trie


def test_empty_trie_only_has_root():
    trie = SequenceTrie()
    assert len(trie) == 1
    assert trie.has_node(KeySequence())
    assert trie.find(KeySequence()) == Partial()
    assert list(trie.items()) == []


def test_find(trie: SequenceTrie):
    assert trie.find(KeySequence.of(A)) == Partial()
    assert trie.find(KeySequence.of(A, B)) == Partial()
    assert trie.find(KeySequence.of(A, B, C)) == Found(command="echo abc")
    assert trie.find(KeySequence.of(A, D)) == Found(command="echo ad")
    assert trie.find(KeySequence.of(B)) == NoPath()
    assert trie.find(KeySequence.of(A, B, C, D)) == NoPath()


def test_node_and_command_queries(trie: SequenceTrie):
    assert trie.has_node(KeySequence.of(A, B))
    assert not trie.has_command(KeySequence.of(A, B))
    assert trie.has_command(KeySequence.of(A, B, C))
    assert not trie.has_node(KeySequence.of(C))
    assert trie.command_for(KeySequence.of(A, D)) == "echo ad"
    assert trie.command_for(KeySequence.of(A)) is None
    assert trie.command_for(KeySequence.of(D)) is None


def test_shared_prefixes_share_nodes(trie: SequenceTrie):
    # root, A, B, C, D (under A), F13
    assert len(trie) == 6


def test_overwrite_replaces_command_without_new_nodes(trie: SequenceTrie):
    before = len(trie)
    assert trie.insert(KeySequence.of(A, B, C), "echo replaced") is True
    assert len(trie) == before
    assert trie.command_for(KeySequence.of(A, B, C)) == "echo replaced"


def test_binding_a_prefix_is_not_a_replacement(trie: SequenceTrie):
    assert trie.insert(KeySequence.of(A, B), "echo ab") is False
    assert trie.find(KeySequence.of(A, B)) == Found(command="echo ab")
    # the longer sequence is still there
    assert trie.find(KeySequence.of(A, B, C)) == Found(command="echo abc")


def test_items_in_key_code_order(trie: SequenceTrie):
    # KEY_D is 32, KEY_B is 48
    assert list(trie.items()) == [
        (KeySequence.of(A, D), "echo ad"),
        (KeySequence.of(A, B, C), "echo abc"),
        (KeySequence.of(KeyCode.KEY_F13), "gromit-mpx -t"),
    ]


def test_dump_uses_key_names(trie: SequenceTrie):
    assert trie.dump() == "\n".join(
        [
            "<root>",
            "  KEY_A",
            "    KEY_D => 'echo ad'",
            "    KEY_B",
            "      KEY_C => 'echo abc'",
            "  KEY_F13 => 'gromit-mpx -t'",
        ]
    )


def test_dump_unknown_code_is_numeric():
    trie = SequenceTrie()
    trie.insert(KeySequence.of(0x1234), "Quit")
    assert trie.dump() == "<root>\n  4660 => 'Quit'"


@pytest.mark.parametrize("code", (-1, 0x10000))
def test_key_sequence_range(code: int):
    with pytest.raises(ValueError):
        KeySequence.of(code)


def test_key_sequence_extended_is_a_new_value():
    seq = KeySequence.of(A)
    longer = seq.extended(B)
    assert list(seq) == [A]
    assert list(longer) == [A, B]
    assert len(longer) == 2
    assert not KeySequence()
    assert longer.describe() == "KEY_A, KEY_B"


@pytest.mark.parametrize(
    "name,expected",
    (
        ("KEY_F13", 183),
        ("key_f13", 183),
        ("f13", 183),
        (" ESC ", 1),
        ("KEY_NOT_A_KEY", None),
    ),
)
def test_code_from_name(name: str, expected):
    assert code_from_name(name) == expected


def test_describe_key():
    assert describe_key(30) == "KEY_A"
    assert describe_key(0x2FE) == "766"


def test_empty_sequence_binds_the_root():
    trie = SequenceTrie()
    assert trie.insert(KeySequence(), "echo root") is False
    assert len(trie) == 1
    assert trie.find(KeySequence()) == Found(command="echo root")
    assert list(trie.items()) == [(KeySequence(), "echo root")]
    assert trie.dump() == "<root> => 'echo root'"


def test_disjoint_sequences_are_independent(trie: SequenceTrie):
    trie.insert(KeySequence.of(C, B, A), "echo cba")
    assert trie.command_for(KeySequence.of(A, B, C)) == "echo abc"
    assert trie.command_for(KeySequence.of(C, B, A)) == "echo cba"
    assert trie.find(KeySequence.of(C, B)) == Partial()
