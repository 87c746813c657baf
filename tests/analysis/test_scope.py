"""
Tests for the Local Scope Analyzer.

Verifies:
1. Undisposed local disposables are reported at their creation call.
2. Any disposal call on the binding in the same body clears it.
3. Discarded (`_`) bindings, untracked disposal calls and repeated calls are handled.
4. Nested scopes are analyzed separately, but closures credit the enclosing body.
"""

import libcst as cst

from performance_lints.analysis.scope import analyze_block, scan_block
from performance_lints.config import DEFAULT_VOCABULARY, DisposalVocabulary
from performance_lints.core.scanners import get_full_name


def run(parse, code: str, func: str = "f", vocabulary: DisposalVocabulary = DEFAULT_VOCABULARY):
  snippet = parse(code)
  return analyze_block(snippet.function(func), vocabulary, snippet.index)


def test_undisposed_timer_reported(parse):
  code = """
def f():
    t = Timer(1.0, tick)
    t.start()
"""
  diags = run(parse, code)
  assert len(diags) == 1
  assert isinstance(diags[0].node, cst.Call)
  assert get_full_name(diags[0].node.func) == "Timer"
  assert diags[0].rule_id == "missing_dispose"


def test_disposed_timer_is_clean(parse):
  code = """
def f():
    t = Timer(1.0, tick)
    t.start()
    t.cancel()
"""
  assert run(parse, code) == []


def test_disposal_position_does_not_matter(parse):
  code = """
def f():
    c = StreamController()
    c.close()
    c.add(1)
"""
  assert run(parse, code) == []


def test_any_method_synonym_counts(parse):
  code = """
def f():
    a = AnimationController()
    b = StreamController()
    s = StreamSubscription()
    a.dispose()
    b.close()
    s.cancel()
"""
  assert run(parse, code) == []


def test_discard_placeholder_ignored(parse):
  code = """
def f():
    _ = StreamController()
"""
  assert run(parse, code) == []


def test_untracked_disposal_gives_no_credit_and_no_diagnostic(parse):
  code = """
def f(other):
    other.close()
    c = StreamController()
"""
  snippet = parse(code)
  scan = scan_block(snippet.function("f"), DEFAULT_VOCABULARY, snippet.index)
  assert "other" in scan.disposed
  assert [c.binding_name for c in scan.candidates] == ["c"]
  assert len(analyze_block(snippet.function("f"), DEFAULT_VOCABULARY, snippet.index)) == 1


def test_repeated_disposal_is_idempotent(parse):
  code = """
def f():
    t = Timer(1, cb)
    t.cancel()
    t.cancel()
"""
  assert run(parse, code) == []


def test_nested_statements_are_scanned(parse):
  code = """
def f(items):
    for item in items:
        if item:
            with lock:
                sub = StreamSubscription()
"""
  assert len(run(parse, code)) == 1


def test_disposal_inside_branch_counts(parse):
  code = """
def f(flag):
    t = Timer(1, cb)
    if flag:
        t.cancel()
"""
  assert run(parse, code) == []


def test_non_instantiation_initializers_ignored(parse):
  code = """
def f(timers):
    a = make_timer()
    b = timers[0]
    c = factory()()
    d = None
"""
  assert run(parse, code) == []


def test_later_declaration_shadows_earlier(parse):
  code = """
def f():
    t = Timer(1, cb)
    t = Timer(2, cb)
"""
  snippet = parse(code)
  func = snippet.function("f")
  scan = scan_block(func, DEFAULT_VOCABULARY, snippet.index)
  second_call = func.body.body[1].body[0].value

  assert len(scan.candidates) == 1
  assert scan.candidates[0].creation_site is second_call

  diags = analyze_block(func, DEFAULT_VOCABULARY, snippet.index)
  assert len(diags) == 1
  assert diags[0].node is second_call


def test_binding_forms(parse):
  code = """
def f():
    a: Timer = Timer(1, cb)
    x = y = StreamController()
    if (w := FocusNode()):
        pass
"""
  snippet = parse(code)
  scan = scan_block(snippet.function("f"), DEFAULT_VOCABULARY, snippet.index)
  assert [c.binding_name for c in scan.candidates] == ["a", "x", "y", "w"]


def test_attribute_receiver_does_not_clear_local(parse):
  code = """
def f(self):
    t = Timer(1, cb)
    self.t.cancel()
"""
  assert len(run(parse, code)) == 1


def test_nested_function_is_its_own_scope(parse):
  code = """
def outer():
    c = StreamController()

    def inner():
        leaked = Timer(1, cb)

    callback = lambda: c.close()
    return callback
"""
  assert run(parse, code, func="outer") == []
  assert len(run(parse, code, func="inner")) == 1


def test_closure_disposal_credits_enclosing_scope(parse):
  code = """
def outer():
    t = Timer(1, cb)

    def stop():
        t.cancel()

    return stop
"""
  assert run(parse, code, func="outer") == []


def test_nested_class_body_is_skipped(parse):
  code = """
def f():
    class Holder:
        c = StreamController()
    return Holder
"""
  assert run(parse, code) == []


def test_local_class_with_close_is_disposable(parse):
  code = """
class Pool:
    def close(self):
        pass

def f():
    p = Pool()
"""
  assert len(run(parse, code)) == 1


def test_local_class_shadows_allow_list(parse):
  code = """
class Timer:
    def start(self):
        pass

def f():
    t = Timer()
"""
  assert run(parse, code) == []


def test_local_function_is_not_a_type(parse):
  code = """
def Timer():
    return 1

def f():
    t = Timer()
"""
  assert run(parse, code) == []


def test_qualified_instantiations(parse):
  code = """
import socket
import threading
from socket import socket as sock

def f():
    t = threading.Timer(1, cb)
    s = socket.socket()
    k = sock()
"""
  snippet = parse(code)
  scan = scan_block(snippet.function("f"), DEFAULT_VOCABULARY, snippet.index)
  assert [c.binding_name for c in scan.candidates] == ["t", "s", "k"]


def test_custom_vocabulary(parse):
  vocab = DisposalVocabulary(method_names=frozenset({"shutdown"}), known_type_names=frozenset({"Executor"}))
  leaking = """
def f():
    e = Executor()
    e.close()
"""
  clean = """
def f():
    e = Executor()
    e.shutdown()
"""
  assert len(run(parse, leaking, vocabulary=vocab)) == 1
  assert run(parse, clean, vocabulary=vocab) == []


def test_unresolved_unknown_type_stays_silent(parse):
  code = """
def f():
    w = Widget()
"""
  assert run(parse, code) == []
