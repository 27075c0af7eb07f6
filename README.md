# flowcontrib

Small building blocks for flow-based integration applications, using only
the Python standard library:

* expression functions for strings, type coercion, base64, UUIDs, random
  numbers and JSON path lookups;
* activities for logging, raising errors, replying and returning mapped
  values, shared application data, counters, in-process channels, SQL
  queries, REST calls and XML-to-JSON conversion.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Expression functions

```python
from flowcontrib import codec, coerce, jsonpath, number, strings

strings.concat("a", "b")                      # "ab"
strings.substring("abc", 1, -1)               # "bc"
strings.equals_ignore_case("foo", "Foo")      # True

coerce.to_int("42")                           # 42
coerce.to_type("true", coerce.to_type_enum("bool"))  # True

codec.decode_string(codec.encode_string("hello"))    # "hello"
codec.new_uuid()                              # a random version 4 UUID string

number.random_int()                           # an int in [0, 10)
number.random_int(100)                        # an int in [0, 100)

jsonpath.path("$.store.bicycle.color", {"store": {"bicycle": {"color": "red"}}})  # "red"
```

### `flowcontrib.strings`

`concat` (two or more strings), `contains`, `contains_any`, `count`,
`equals`, `equals_ignore_case`, `index`, `index_any`, `last_index`,
`length`, `match_regex`, `repeat`, `replace` (a negative limit replaces
every occurrence), `replace_all`, `replace_regex` (`$1`, `${name}` and `$$`
are expanded in the replacement), `split`, `substring` (a size of `-1`
runs to the end), `to_float`, `to_integer`, `to_lower`, `to_upper`,
`trim`, `trim_left`, `trim_right`, `trim_prefix` and `trim_suffix`.
Arguments of the wrong type raise `TypeError`; bad values raise
`ValueError`.

### `flowcontrib.coerce`

`DataType` enumerates the known types; `to_type_enum(name)` looks one up by
name (`"string"`, `"int"`, `"float64"`, `"bool"`, `"object"`, `"array"`,
`"params"`, `"bytes"`, `"datetime"` and others). `to_type(value, data_type)`
dispatches to `to_string`, `to_int`, `to_int32`, `to_int64`, `to_float32`,
`to_float64`, `to_bool`, `to_bytes`, `to_params`, `to_object` or `to_array`;
`ANY` returns the value unchanged. `fn_to_type(value, type_name)` is the
two-argument expression form. Failures raise `CoercionError`, a
`ValueError`.

### `flowcontrib.jsonpath`

`path(expression, data)` supports dotted and bracketed keys, indexes
(negative too), ranges such as `[0:2]`, index lists, `*`, recursive descent
with `..`, and filters such as `[?(@.price == 22.99)]`, including `=~ /re/i`.
Malformed expressions and missing keys raise `JsonPathError`.

## Activities

Every activity has `eval(ctx)`, which takes an `ActivityContext` and returns
`True` when done, raising on failure (`ActivityError` for errors the
activity reports itself). Activities that need settings are built with
the class method `from_context`, given an `InitContext` whose `settings`
dictionary uses the configuration names shown below.

```python
from flowcontrib.activity import ActivityContext, InitContext
from flowcontrib.appstate import CounterActivity

act = CounterActivity.from_context(
    InitContext(settings={"counterName": "hits", "op": "increment"})
)
ctx = ActivityContext()
act.eval(ctx)
ctx.get_output("value")  # 1
```

`flowcontrib.activity` holds the shared types: `Scope` (named values with
an optional parent), `ActivityHost` (the host's `scope`, plus `reply` and
`return_`, which record what they are given), `InitContext`,
`ActivityContext` (inputs, outputs, host and logger) and the abstract
`Activity`.

| Activity | Module | Settings | Inputs | Outputs |
| --- | --- | --- | --- | --- |
| `NoopActivity` | `activity` | | | |
| `ErrorActivity` | `activity` | | `message`, `data` | raises `ActivityError` |
| `LogActivity` | `activity` | | `message`, `addDetails` | |
| `ReplyActivity` | `mapping` | `mappings` (required) | | `host.reply(...)` |
| `ReturnActivity` | `mapping` | `mappings` | | `host.return_(...)` |
| `MapperActivity` | `mapping` | `mappings` (required) | | values set in the host scope |
| `AppDataActivity` | `appstate` | `name`, `op` (`get`/`set`), `type` | `value` | `value` |
| `CounterActivity` | `appstate` | `counterName`, `op` (`get`/`increment`/`reset`) | | `value` |
| `ChannelActivity` | `channel` | | `channel`, `data` | |
| `SQLQueryActivity` | `sqlquery` | `dbType`, `driverName`, `dataSourceName`, `query`, `maxOpenConnections`, `maxIdleConnections`, `disablePrepared`, `labeledResults` | `params` | `results` |
| `RestActivity` | `rest` | `method`, `uri`, `headers`, `proxy`, `timeout`, `sslConfig` and others | `pathParams`, `queryParams`, `headers`, `content` | `status`, `data` |
| `Xml2JsonActivity` | `xml2json` | | `xmlData` | `jsonObject` |

### Mappings

`mapping.Mapper` turns a dictionary of mappings into values: a string that
starts with `=` is an expression such as `=$.name` or `=$.name.field[0]`,
resolved against the host scope; anything else is a literal.
`MapperFactory.new_mapper` returns `None` for empty mappings.

### Shared state and channels

`appstate.get_app_value` / `set_app_value` hold process-wide values;
`appstate.get_counter(name)` returns a thread-safe `Counter` with `get`,
`increment` and `reset`. `channel.new_channel(name, buffer_size)` registers
a `Channel`; callbacks added with `register_callback` receive published
messages once `start_channels()` (or `Channel.start`) has run, until
`stop_channels()`.

### SQL

```python
from flowcontrib.sqldb import get_db_helper
from flowcontrib.sqlstatement import new_sql_statement

stmt = new_sql_statement(get_db_helper("sqlserver"), "select * from t where a = :foo")
stmt.prepared_sql                          # "select * from t where a = @foo"
stmt.to_statement_sql({"foo": True})       # "select * from t where a = TRUE"
```

`sqldb.get_db_helper` knows `mysql`, `oracle`, `postgres`, `sqlite` and
`sqlserver`, each with its parameter style and literal rendering.

### REST and XML

`rest.build_uri("http://localhost:7070/flow/:id", {"id": "1234"})` gives
`"http://localhost:7070/flow/1234"`; `rest.content_type_for` picks the
request Content-Type from the body. `xml2json.convert` turns an XML
document into a dictionary keyed by the root element: attributes get a `-`
prefix, repeated elements become lists, numbers become floats and
`true`/`false` become booleans.

## What this package does not do

* There is no flow engine, trigger or command line: activities run only
  when your code builds their contexts and calls `eval`.
* `sqlquery.connect` opens SQLite databases only (driver name `sqlite3` or
  `sqlite`); other driver names raise `ValueError`, although SQL text can
  still be prepared for every listed database kind.
* Mappings resolve only literals and `=$.name…` expressions, not a full
  expression language.