import copy
import pickle

import pytest
from safepath.safepath_datatypes import (
    AccessChain, AccessStep, Property, Index, Call, Missing, Empty,
    is_absent, absent_tag,
    SafePathError, InvalidAccessError, TypeMismatchError, PathSyntaxError
)

# --- Absent marker Tests ---

def test_absent_markers_are_falsy_and_distinct():
    assert not Missing
    assert not Empty
    assert Missing is not Empty
    assert Missing != Empty
    assert repr(Missing) == "Missing"
    assert repr(Empty) == "Empty"

def test_absent_markers_keep_their_tag():
    assert Missing.tag == "missing"
    assert Empty.tag == "empty"
    assert absent_tag(Missing) == "missing"
    assert absent_tag(Empty) == "empty"
    assert absent_tag(None) == "empty"
    assert absent_tag(0) is None

@pytest.mark.parametrize("value", [Missing, Empty, None])
def test_is_absent_true(value):
    assert is_absent(value) is True

@pytest.mark.parametrize("value", [0, "", [], {}, False, "Missing"])
def test_is_absent_false_for_falsy_present_values(value):
    assert is_absent(value) is False

def test_absent_markers_survive_copy_and_pickle():
    assert copy.copy(Missing) is Missing
    assert copy.deepcopy({"k": Empty})["k"] is Empty
    assert pickle.loads(pickle.dumps(Missing)) is Missing
    assert pickle.loads(pickle.dumps(Empty)) is Empty


# --- Step Tests ---

def test_steps_are_access_steps_with_kinds():
    assert isinstance(Property("a"), AccessStep)
    assert Property("a").kind == "property"
    assert Index(0).kind == "index"
    assert Call().kind == "call"

def test_step_equality_and_hash():
    assert Property("a") == Property("a")
    assert hash(Property("a")) == hash(Property("a"))
    assert Property("a") != Property("b")
    assert Index(1) == Index(1)
    assert Index(1) != Index(2)
    assert Property("a") != Index(0)
    assert Call(1, x=2) == Call(1, x=2)
    assert hash(Call(1, x=2)) == hash(Call(1, x=2))
    assert Call(1) != Call(2)

def test_call_with_unhashable_args_is_still_hashable():
    step = Call([1, 2], opts={"a": 1})
    assert isinstance(hash(step), int)

def test_step_reprs():
    assert repr(Property("user")) == "Property<'user'>"
    assert repr(Index(3)) == "Index(3)"
    assert repr(Call(1, "a", flag=True)) == "Call(1, 'a', flag=True)"

def test_step_argument_validation():
    with pytest.raises(TypeError):
        Property(1)
    with pytest.raises(TypeError):
        Index("0")
    with pytest.raises(TypeError):
        Index(True)

def test_deferred_call_runs_factory_only_on_resolve():
    seen = []
    def make_args():
        seen.append("ran")
        return [1, 2]
    step = Call.deferred(make_args)
    assert seen == []
    assert step.resolve_args() == (1, 2)
    assert seen == ["ran"]

def test_deferred_calls_compare_by_factory_identity():
    def make_args():
        return []
    assert Call.deferred(make_args) == Call.deferred(make_args)
    assert Call.deferred(make_args) != Call.deferred(lambda: [])
    assert Call.deferred(make_args) != Call()


# --- Chain Tests ---

def test_chain_defaults_to_unguarded():
    chain = AccessChain([Property("a"), Index(0)])
    assert len(chain) == 2
    assert chain[0] == Property("a")
    assert chain.safe_flags == (False, False)

def test_chain_guarded_constructor():
    chain = AccessChain.guarded([Property("a"), Call()])
    assert chain.safe_flags == (True, True)

def test_chain_pairs():
    chain = AccessChain([Property("a"), Index(1)], [True, False])
    assert chain.pairs() == [(Property("a"), True), (Index(1), False)]

def test_chain_slice_keeps_flags():
    chain = AccessChain([Property("a"), Index(1), Call()], [False, True, True])
    tail = chain[1:]
    assert isinstance(tail, AccessChain)
    assert tail.steps == (Index(1), Call())
    assert tail.safe_flags == (True, True)

def test_chain_equality_includes_flags():
    a = AccessChain([Property("a")], [True])
    b = AccessChain([Property("a")], [True])
    c = AccessChain([Property("a")], [False])
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert a != "a"

def test_chain_rejects_mismatched_flags():
    with pytest.raises(ValueError):
        AccessChain([Property("a")], [True, False])

def test_chain_rejects_non_steps():
    with pytest.raises(TypeError):
        AccessChain(["a"])

def test_empty_chain_is_legal():
    chain = AccessChain()
    assert len(chain) == 0
    assert chain.safe_flags == ()


# --- Error Tests ---

def test_invalid_access_error_carries_index_and_kind():
    err = InvalidAccessError(2, "call", Call())
    assert isinstance(err, SafePathError)
    assert err.step_index == 2
    assert err.kind == "call"
    assert "step 2" in str(err)
    assert "absent" in str(err)

def test_type_mismatch_error_is_a_type_error():
    err = TypeMismatchError(0, "property", 5, Property("x"))
    assert isinstance(err, SafePathError)
    assert isinstance(err, TypeError)
    assert err.value == 5
    assert "int is not a record" in str(err)
    assert ".x" in str(err)

def test_path_syntax_error_is_a_value_error():
    err = PathSyntaxError("a..b", "boom")
    assert isinstance(err, ValueError)
    assert err.text == "a..b"
    assert "boom" in str(err)
