"""Unit tests covering the objective adapter and trial execution."""
from __future__ import annotations

import asyncio
import unittest
from typing import Any

import numpy as np

from trialspace import hp
from trialspace.distributions import StandardSpace
from trialspace.domain import Domain, normalize_result, run_trial
from trialspace.errors import (
    IncompleteResultError,
    InvalidReturnError,
    InvalidStatusError,
    ResultContractError,
)
from trialspace.results import JobState
from trialspace.trials import Trials


def _constant(value: Any) -> Domain:
    return Domain(lambda args, params: value)


class DomainEvaluateTests(unittest.TestCase):
    def test_number_becomes_ok_loss(self) -> None:
        result = asyncio.run(_constant(3.14).evaluate({}))
        self.assertEqual(result, {"loss": 3.14, "status": "ok"})

    def test_integer_loss_is_accepted(self) -> None:
        result = asyncio.run(_constant(2).evaluate({}))
        self.assertEqual(result, {"loss": 2.0, "status": "ok"})

    def test_objective_receives_args_and_fixed_params(self) -> None:
        calls: list[tuple[Any, Any]] = []

        def objective(args: Any, params: Any) -> float:
            calls.append((args, params))
            return args["x"] * params["scale"]

        domain = Domain(objective, expr={"x": hp.uniform(0, 1)}, params={"scale": 2})
        result = asyncio.run(domain.evaluate({"x": 0.25}))

        self.assertEqual(calls, [({"x": 0.25}, {"scale": 2})])
        self.assertEqual(result["loss"], 0.5)

    def test_coroutine_objective_is_awaited(self) -> None:
        async def objective(args: Any, params: Any) -> dict[str, Any]:
            await asyncio.sleep(0)
            return {"status": "ok", "accuracy": 0.9, "epochs": 3}

        result = asyncio.run(Domain(objective).evaluate({}))
        self.assertEqual(result, {"status": "ok", "accuracy": 0.9, "epochs": 3})

    def test_structured_non_ok_result_needs_no_signal(self) -> None:
        result = asyncio.run(_constant({"status": "fail", "reason": "diverged"}).evaluate({}))
        self.assertEqual(result, {"status": "fail", "reason": "diverged"})

    def test_structured_result_values_are_returned_unchanged(self) -> None:
        failed = {"status": "fail", "loss": "n/a", "trace": ["step 3"], "attempt": None}
        self.assertEqual(asyncio.run(_constant(failed).evaluate({})), failed)

        result = asyncio.run(_constant({"status": "ok", "loss": "0.5"}).evaluate({}))
        self.assertEqual(result, {"status": "ok", "loss": "0.5"})
        self.assertIsInstance(result, dict)

    def test_none_is_an_invalid_return(self) -> None:
        with self.assertRaises(InvalidReturnError):
            asyncio.run(_constant(None).evaluate({}))

    def test_unknown_status_is_rejected(self) -> None:
        with self.assertRaises(InvalidStatusError) as ctx:
            asyncio.run(_constant({"status": "bogus"}).evaluate({}))
        self.assertEqual(ctx.exception.status, "bogus")

    def test_ok_without_signal_is_incomplete(self) -> None:
        with self.assertRaises(IncompleteResultError):
            asyncio.run(_constant({"status": "ok"}).evaluate({}))

    def test_non_finite_and_boolean_values_carry_no_status(self) -> None:
        for value in (float("nan"), float("inf"), True, "0.5"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidStatusError):
                    normalize_result(value)

    def test_contract_errors_are_value_errors(self) -> None:
        self.assertTrue(issubclass(ResultContractError, ValueError))
        self.assertTrue(issubclass(InvalidStatusError, ResultContractError))

    def test_new_result_is_a_fresh_placeholder(self) -> None:
        domain = _constant(1.0)
        first = domain.new_result()
        first["status"] = "running"
        self.assertEqual(domain.new_result(), {"status": "new"})

    def test_sample_uses_domain_expression(self) -> None:
        domain = Domain(lambda args, params: 0.0, expr={"x": hp.choice([7])})
        self.assertEqual(domain.sample(StandardSpace(), np.random.default_rng(0)), {"x": 7})


class RunTrialTests(unittest.TestCase):
    def _new_doc(self, trials: Trials, domain: Domain, args: Any) -> dict[str, Any]:
        ids = trials.reserve_ids(1)
        (doc,) = trials.build_docs(ids, [domain.new_result()], [args])
        trials.insert_doc(doc)
        return doc

    def test_successful_trial_ends_done(self) -> None:
        trials = Trials()
        domain = Domain(lambda args, params: args["x"] ** 2)
        doc = self._new_doc(trials, domain, {"x": 3})

        result = asyncio.run(run_trial(domain, doc))

        self.assertEqual(result, {"loss": 9.0, "status": "ok"})
        self.assertEqual(doc["state"], JobState.DONE)
        self.assertIs(doc["result"], result)
        self.assertIsNotNone(doc["book_time"])
        self.assertGreaterEqual(doc["refresh_time"], doc["book_time"])

    def test_contract_error_marks_trial_error_and_propagates(self) -> None:
        trials = Trials()
        domain = _constant({"status": "bogus"})
        doc = self._new_doc(trials, domain, {"x": 1})

        with self.assertRaises(InvalidStatusError):
            asyncio.run(run_trial(domain, doc))

        self.assertEqual(doc["state"], JobState.ERROR)
        self.assertEqual(doc["result"]["status"], "fail")
        self.assertEqual(doc["result"]["reason"], "exception:InvalidStatusError")
        trials.refresh()
        self.assertEqual(len(trials), 0)

    def test_objective_exception_propagates_unchanged(self) -> None:
        def objective(args: Any, params: Any) -> float:
            raise RuntimeError("worker lost")

        trials = Trials()
        domain = Domain(objective)
        doc = self._new_doc(trials, domain, {})

        with self.assertRaisesRegex(RuntimeError, "worker lost"):
            asyncio.run(run_trial(domain, doc))
        self.assertEqual(doc["state"], JobState.ERROR)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
