# x402pay

Building blocks for clients that pay for HTTP resources answered with
`402 Payment Required`:

- `x402pay.signer`: the data types `TokenConfig`, `PaymentRequirement` and
  `PaymentPayload`, and the abstract `Signer` class.
- `x402pay.selector`: `DefaultPaymentSelector` picks the best signer for a
  server's list of accepted payment options and signs with it.
  `find_matching_requirement` finds the option that a payment answers.
- `x402pay.retry`: `with_retry` and `with_simple_retry` retry a call with
  exponential backoff. A `RetryContext` can cancel the retries or give them a
  timeout.

The package uses only the standard library.

## Installation

```
pip install x402pay
```

## Writing a signer

Subclass `Signer` and provide the `network` and `scheme` properties and the
`can_sign(requirement)` and `sign(requirement)` methods. The attributes
`priority` (default `0`), `tokens` (default empty) and `max_amount` (the
per-call limit in the token's smallest unit, default `None` for no limit) can
be set on the class, on the instance or as properties.

```python
from x402pay.signer import PaymentPayload, PaymentRequirement, Signer, TokenConfig


class DemoSigner(Signer):
    network = "base"
    scheme = "exact"
    priority = 1
    tokens = (TokenConfig(address="0xUSDC", symbol="USDC", decimals=6),)
    max_amount = 2_000_000

    def can_sign(self, requirement: PaymentRequirement) -> bool:
        return requirement.network == self.network and any(
            t.address.lower() == requirement.asset.lower() for t in self.tokens
        )

    def sign(self, requirement: PaymentRequirement) -> PaymentPayload:
        return PaymentPayload(scheme=self.scheme, network=self.network, payload={"demo": "payment"})
```

## Choosing a signer

`DefaultPaymentSelector().select_and_sign(requirements, signers)` skips every
requirement whose `max_amount_required` is not a whole decimal number. For the
rest, it considers every pair of requirement and signer in which
`signer.can_sign(requirement)` is true and the amount does not exceed the
signer's `max_amount`. It then signs with the best pair, in this order:

1. the lowest signer `priority` (0 comes before 1, and 1 before 2),
2. the lowest `priority` of the signer's token whose address matches the
   requirement's asset, ignoring case (0 if none matches),
3. the signer that comes first in `signers`,
4. the requirement that comes first in `requirements`.

```python
from x402pay.selector import DefaultPaymentSelector, PaymentError

try:
    payload = DefaultPaymentSelector().select_and_sign(requirements, [DemoSigner()])
except PaymentError as err:
    print(err.code, err.details)
```

It raises `PaymentError` in these cases:

| `err.code` | Cause |
| --- | --- |
| `ErrorCode.NO_VALID_SIGNER` | No signers are given, or no signer can pay any option. `err.details["options"]` then lists the options as `network:asset`. |
| `ErrorCode.INVALID_REQUIREMENTS` | No options are given, or no option has a valid amount. |
| `ErrorCode.SIGNING_FAILED` | The chosen signer's `sign` raised; that exception is chained as the cause. |

`find_matching_requirement(payment, requirements)` returns the first
requirement with the same `network` and `scheme` as the payment, compared
case-sensitively. If none matches it raises `PaymentError` with
`ErrorCode.UNSUPPORTED_SCHEME`, with the payment's `network` and `scheme` in
`err.details`.

`PaymentError.with_details(key, value)` adds an entry to `details` and
returns the error.

## Retrying transient failures

```python
from x402pay.retry import RetryConfig, RetryContext, with_retry

ctx = RetryContext(timeout=2.0)
config = RetryConfig(max_attempts=4, initial_delay=0.05, max_delay=1.0, multiplier=2.0)
result = with_retry(ctx, config, lambda exc: isinstance(exc, ConnectionError), fetch)
```

`fetch` is any callable that takes no arguments. Delays are in seconds.

- The wait between attempts starts at `initial_delay` and is multiplied by
  `multiplier` after each wait, never growing past `max_delay`. There is no
  wait after the last attempt.
- An exception that `is_retryable` rejects is raised at once.
- When every attempt fails, `MaxRetriesExceeded` is raised, chained to the
  last exception, which is also kept as `last_error`.
- A `max_attempts` below 1 raises `ValueError` before any attempt.
- `ctx` may be `None` for no cancellation. If the context is cancelled with
  `ctx.cancel()`, `ContextCancelled` is raised; once its timeout passes,
  `ContextDeadlineExceeded` is raised. Both are checked before each attempt
  and end a wait early.

`with_simple_retry(ctx, fn, is_retryable)` does the same with the default
`RetryConfig()`: 3 attempts, a wait that starts at 0.1 s, doubles each time
and stops growing at 5 s.

## What the package does not do

It contains no ready-made signers for any blockchain, and it does not make
HTTP requests or read `402` responses and payment headers. Those are left to
the code that uses it.

## Running the tests

```
pip install -e ".[test]"
pytest
```