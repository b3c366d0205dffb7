# moveguard

moveguard is a library of static safety checks for Move modules, aimed at the
Sui object model. You describe a module as plain Python objects from
`moveguard.syntax`: `Module`, `Function`, `Struct`, `Parameter`, types such as
`MutableReference` and `BaseType`, and statements such as `Assignment`,
`Return`, `Call` or `Assert`. The analyzers walk that description and report
what they find.

## What it checks

- **Reference safety** (each returns a list of `ReferenceLeak` records):
  - `ReferenceFlowAnalyzer` (`moveguard.reference_flow`) treats every accessed
    field name as a reference and reports later reads of it.
  - `SuiReferenceFlowAnalyzer` (`moveguard.reference_flow_sui`) adds tracking
    of object and capability variables, seeded through its constructor, and
    reports transferred or mutably shared objects, mutable object references
    that are returned, and capabilities with no permissions or with
    delegations.
  - `ReferenceStateAnalyzer` (`moveguard.reference_state`) and
    `ReferencePathAnalyzer` (`moveguard.reference_path`) report references
    that escape through a return, an assignment, the end of a scope, or that
    are never closed.
- **State transitions**: `StateTransitionAnalyzer` (`moveguard.transitions`)
  and `ReferenceTransitionAnalyzer` (`moveguard.reference_transitions`) accept
  only a fixed set of reference-state transitions. An illegal transition
  raises `InvalidTransitionError` or `ReferenceTransitionError`;
  `ReferenceTransitionAnalyzer` also checks that borrows end in nesting order.
  Both have a `check_safety()` that returns `SafetyViolation` records.
- **Module safety**: `SafetyChecker` (`moveguard.safety_checker`) flags
  functions whose names start with `public` and that take or return mutable
  references, writes to invariant-protected fields, and mutable references
  that escape through a return.
- **Sui patterns**: `SuiSafetyChecker` (`moveguard.sui_checks`) flags assigned
  field accesses that transfer without a guard, or touch shared state without
  synchronization.
- **Properties**: `SafetyVerifier` (`moveguard.verifier`) checks registered
  `LocalProperty`, `UnreachableProperty` and `StrongProperty` values, a `UID`
  field on structs with the `key` ability, ownership checks before
  `transfer::transfer` calls, and synchronization around shared-object calls.
- **Trust boundaries**: `TraceAnalyzer` (`moveguard.trace`) records calls
  across module and trust boundaries as security events (`BoundaryCrossing`,
  `CallToTrusted`, `ReturnToUntrusted`, `StateAccess`) and keeps a call chain
  for each module.

Findings use the records in `moveguard.model`: `SafetyViolation`,
`ReferenceLeak`, `Location`, `FieldId`, and the `Severity` and `ViolationType`
enums.

## Installation

```
pip install moveguard
```

Python 3.10 or later is required. The package has no dependencies outside the
standard library.

## Example

```python
from moveguard.syntax import Module, Function, Call
from moveguard.trace import TraceAnalyzer, BoundaryCrossing, BoundaryKind

analyzer = TraceAnalyzer()
analyzer.mark_trusted_module("trusted")

module = Module("untrusted")
function = Function("test")
function.add_statement(Call("trusted::func", []))
module.add_function(function)

events = analyzer.analyze_module(module)
assert any(
    isinstance(e, BoundaryCrossing) and e.kind is BoundaryKind.UNTRUSTED_TO_TRUSTED
    for e in events
)
print(analyzer.get_call_chain("untrusted"))  # ['trusted']
```

The verifier is used in the same way:

```python
from moveguard.syntax import Module, Function, Call
from moveguard.verifier import SafetyVerifier, UnreachableProperty

verifier = SafetyVerifier()
verifier.add_unreachable_property(
    "secret", UnreachableProperty(resource="secret", access_path=["public"])
)

module = Module("test")
function = Function("test")
function.add_statement(Call("public::secret", []))
module.add_function(function)

for violation in verifier.verify_module(module):
    print(violation.severity, violation.violation_type, violation.message)
# HIGH Resource Safety Violation Resource secret is reachable through unauthorized path
```

## Reports and metrics

- `ErrorReporter` (`moveguard.reporter`) collects `AnalysisError` records and
  renders them as terminal text, coloured with ANSI codes unless created with
  `color=False`.
- `PatternDatabase` (`moveguard.patterns`) matches text against risky keywords
  for each `PatternType` and gives each pattern a `RiskLevel`.
- `SuiBenchmarkCollector` (`moveguard.bench`) accumulates module, object and
  capability analysis counts and durations plus labelled memory samples, then
  produces a `SuiAnalysisBenchmark` with `finish()` or a text report with
  `report()`.

## What it does not do

moveguard does not read Move source files: there is no parser, so modules
must be built from the `moveguard.syntax` classes by the caller. Nor does it
have a command-line tool; everything is used as a library from Python.

## Running the tests

```
pip install -e ".[test]"
pytest
```