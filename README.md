# burneroperator

Reconciliation logic for three custom resources in the `grpc.burner.dev/v1alpha1`
API group (`burneroperator.api.GROUP_VERSION`):

- **GrpcBurner** – `GrpcBurnerReconciler` keeps a `<name>-burner` Deployment of
  gRPC load generators in line with the requested replicas, mode, message size,
  QPS, duration and resources. It adds the finalizer
  `grpcburner.grpc.burner.dev/finalizer`, deletes the Deployment and drops the
  finalizer once the GrpcBurner is marked for deletion, and reports `Pending`,
  `Running` or `Failed` in its status together with the ready replica count and
  the time the phase last changed.
- **BurnerJob** – `BurnerJobReconciler` creates a `<name>-job` Job aimed at the
  target service, owned by the BurnerJob, and sets the status phase to
  `Succeeded` or `Failed` (with the condition's message) from the conditions of a
  Job that was already present.
- **ObservabilityConfig** – `ObservabilityConfigReconciler` copies the requested
  log level and metrics switch into the status, with the message
  `settings changed`.

The reconcilers work against `InMemoryClient`, an object store with `get`,
`create`, `update`, `update_status`, `delete` and `list`, so the whole control loop
can be driven and inspected from plain Python.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from burneroperator.api import GrpcBurner, GrpcBurnerSpec, ObjectMeta
from burneroperator.client import InMemoryClient, ObjectKey, Request
from burneroperator.grpcburner import GrpcBurnerReconciler
from burneroperator.resources import Deployment

client = InMemoryClient()
client.create(
    GrpcBurner(
        metadata=ObjectMeta(name="demo", namespace="default"),
        spec=GrpcBurnerSpec(
            replicas=1, mode="unary", message_size=100, qps=10, duration="10s"
        ),
    )
)

reconciler = GrpcBurnerReconciler(client)
reconciler.reconcile(Request(namespace="default", name="demo"))

deployment = client.get(Deployment, ObjectKey(namespace="default", name="demo-burner"))
print(deployment.spec.replicas)  # 1

burner = client.get(GrpcBurner, ObjectKey(namespace="default", name="demo"))
print(burner.metadata.finalizers)  # ['grpcburner.grpc.burner.dev/finalizer']
```

`BurnerJobReconciler` (in `burneroperator.burnerjob`) and
`ObservabilityConfigReconciler` (in `burneroperator.observability`) are used the
same way. `Request.for_object(obj)` and `ObjectKey.from_object(obj)` build a
request or key from a stored object.

The helpers `generate_deployment` and `is_deployment_spec_equal`
(`burneroperator.grpcburner`) and `build_job` (`burneroperator.burnerjob`) return
or compare the objects the reconcilers would create, without touching a client.
`set_controller_reference(owner, obj)` in `burneroperator.resources` records
`owner` as the controlling owner of `obj`.

`GrpcBurnerSpec.validate()` checks the schema rules: replicas, message size and
QPS at least 1, a mode among `unary`, `server-streaming`, `client-streaming` and
`bidirectional-streaming`, and a duration such as `10s`, `5m` or `2h`. It raises
`ValueError` listing every violation. The reconcilers do not call it themselves.

## The object store

- Status is a subresource: `update` keeps the stored status, `update_status`
  changes only the status.
- `delete` removes an object at once unless it carries finalizers; then it only
  sets the deletion timestamp, and the object disappears when an `update` leaves
  it with no finalizers.
- `get`, `list` and the writes work on copies, so objects handed out can be
  changed freely.
- `InMemoryClient(*objects, clock=...)` creates the given objects up front;
  `clock` supplies deletion timestamps. `GrpcBurnerReconciler` also takes a
  `clock` for `last_run_time`.

## Metrics

`burneroperator.metrics` provides two `CounterVec` counters keyed by controller
name, `RECONCILE_TOTAL` (`grpcburner_operator_reconcile_total`) and
`RECONCILE_ERRORS` (`grpcburner_operator_reconcile_errors_total`).
`GrpcBurnerReconciler` increments them under the label `grpcburner` and accepts
other counters in their place. `register_custom_metrics(registry)` adds both to
a `Registry` (the module's `DEFAULT_REGISTRY` when none is given); registering a
name twice raises `ValueError`.

## Errors

Client operations raise `NotFoundError` (a `LookupError`) when an object is
missing and `AlreadyExistsError` when creating an object that already exists.
A reconciler treats a missing primary object as nothing to do; any other failure
is raised to the caller. `BurnerJobReconciler` always creates the Job, so
reconciling a BurnerJob whose Job is already stored raises `AlreadyExistsError`.
`set_controller_reference` raises `ValueError` for an owner in another namespace
and `AlreadyOwnedError` when a different controller already owns the object.

## What this package does not do

It contains no command to run and does not talk to a cluster: objects live only
in `InMemoryClient`, and nothing watches for changes or calls the reconcilers on
its own — the caller invokes `reconcile` for each request. It serves no metrics
or health endpoints, exports no traces, and does not include the load generator
that the created Deployments and Jobs run.