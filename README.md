# huma

Building blocks for typed REST API handlers: RFC 9457 problem-detail errors,
operation ID and summary generation, discovery and parsing of request
parameters, response header serialisation and size-limited body reading.
It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Errors (`huma.errors`)

`ErrorModel` is a problem-details error (`type`, `title`, `status`, `detail`,
`instance`, `errors`) that is also a Python exception, so it can be raised.
`ErrorDetail` describes one problem with a `message`, `location` and `value`.

```python
from huma.errors import ErrorDetail, ErrorModel, error_404_not_found

err = ErrorModel(status=400, detail="test err")
err.add(ErrorDetail(message="test detail", location="body.foo", value="bar"))
err.add(ValueError("plain error"))

str(err)                               # "test err"
str(err.errors[0])                     # "test detail (body.foo: bar)"
str(err.errors[1])                     # "plain error"
err.content_type("application/json")   # "application/problem+json"
err.content_type("application/cbor")   # "application/problem+cbor"

raise error_404_not_found("no such thing")
```

`add` uses any object with an `error_detail()` method as it is and wraps
anything else by its message. `new_error(status, msg, *errors)` builds an
`ErrorModel` whose title is `status_text(status)`, skipping `None` entries.
The helpers `error_400_bad_request` through `error_504_gateway_timeout`, and
`status_304_not_modified`, call it with the matching status code. All of
them are instances of `StatusError`, whose `status` attribute holds the code.

## Operation naming (`huma.naming`)

```python
from huma.naming import generate_operation_id, generate_summary, kebab

generate_operation_id("PUT", "/things/{thing-id}", None)
# "put-things-by-thing-id"
generate_summary("PUT", "/things/{thingId}/favorite", None)
# "Put things by thing ID favorite"
kebab("ThingID")
# "thing-id"
```

The third argument is the response class or an instance of it. A `GET`
whose class annotates a `body` field with a sequence type (`list`, `tuple`,
`bytes`, ...) becomes a `list-...` operation. Common initialisms such as ID,
URL and HTTP are upper-cased in summaries.

## Finding fields (`huma.fields`)

`find_in_type(tp, on_type, on_field, recurse_fields, *ignored_names)` walks a
dataclass type, following lists and dict values, and records the path to
every type or field for which a callback returns something other than
`None`. Tags are read from `dataclasses.field(metadata=...)`; a field with
`metadata={"embedded": True}` is searched as an embedded struct.

The resulting `FindResult` can be followed through values:
`every(value, func)` calls `func(slot, found)`, where `slot.value` reads the
item and assigning to it writes back; `every_located(value, func)` also
passes a location such as `query.count` or `body.items[3].tags`.
`json_name(field)` gives a field's `json` tag name or its lower-cased name.

## Request parameters (`huma.params`)

Fields tagged with `path`, `query`, `header` or `cookie` are parameters.
Other keys are `default`, `required`, `hidden`, `example` and `time_format`.

```python
from dataclasses import dataclass, field
from huma.params import ParamError, find_params, parse_param

@dataclass
class Input:
    thing_id: str = field(default="", metadata={"path": "thing-id"})
    count: int = field(default=0, metadata={"query": "count", "default": "5"})

params = {found.value.name: found.value for found in find_params(Input).paths}
parse_param(params["count"], "")       # 5, from the default
parse_param(params["thing-id"], "abc") # "abc"

try:
    parse_param(params["count"], "bad")
except ParamError as err:
    str(err)                           # "invalid integer (query.count: bad)"
```

Path parameters are always required; a missing required value raises
`ParamError` ("required path parameter is missing"), a missing optional one
gives `None`. Supported types are `str`, `int`, `float`, `bool`, lists of
those (comma-separated), `datetime.datetime` (RFC 3339 by default, the HTTP
date format for headers), `http.cookies.Morsel`, `uuid.UUID`, and any type
with a `from_text(text)` class method. Optional fields raise `TypeError` in
`find_params`; unparseable types raise `TypeError` in `parse_param`.
`parse_list(values, parse)` parses each value in turn.

## Response headers and bodies (`huma.headers`)

`find_headers(tp)` returns the header fields of an output dataclass: every
field except `status` and `body`, named by its `header` tag or its field
name, as `HeaderInfo` values. `write_header(write, info, value)` calls
`write(name, text)`, skipping empty strings and formatting numbers,
booleans, date/times and cookies for the wire.

```python
import io
from huma.headers import BodyTooLargeError, HeaderInfo, read_body, write_header

headers = {}
write_header(headers.__setitem__, HeaderInfo(field=None, name="Float"), 3.45)
headers                                # {"Float": "3.45"}

read_body(io.BytesIO(b"abc"), 0)       # b"abc"
try:
    read_body(io.BytesIO(b"foobarbaz"), 1)
except BodyTooLargeError as err:
    err.status                         # 413
```

`read_body` closes the reader when done and treats a `None` reader as an
empty body.

## What this package does not do

There is no router, no server, no operation registration or request
dispatch, no content negotiation or serialisation, no schema generation or
validation and no OpenAPI document. The modules above are pieces an HTTP
framework can use; wiring them to requests and responses is left to the
application.