# bullean

A library for building simple trading strategies from candle data. It covers
streaming candles, labelling them for training, voting models, small neural
networks and a tabular Q-learning agent.

## What is in it

- **`bullean.entities`**: the data types. It has `Candle`, `Trade`,
  `StreamReqMsg`, `StreamResMsg`, `ClientConfig`, `Data` and `PolicyConfig`,
  plus the enums `FeatureType`, `ResponseType` and `ClientVersion`. Candles and
  stream messages convert to and from JSON-style dictionaries with
  `from_dict` and `to_dict`.
- **`bullean.stream`**: the websocket connection to the candle stream service.
  - `new_client(config)` connects and sends the subscription request. A
    history size above `HISTORY_LIMIT` is capped to that limit. The function
    returns `None` when the credentials are rejected with a 401 status.
  - `StreamClient.on_ready(fn)` collects history messages until the service
    reports it is done. It then calls `fn` with all collected candles in a new
    thread and returns that thread.
  - `StreamClient.on_candle(fn)` calls `fn` with each batch of new candles. It
    runs in a background thread.
  - `StreamClient` can be used as a context manager. `close()` closes the
    connection.
  - `graceful_exit(stop_event)` blocks the main thread until SIGINT or SIGTERM
    arrives, or until the event is set.
- **`bullean.indicators`**: `ema(candles, period)` and `ma(candles, period)`,
  both computed over closing prices.
- **`bullean.dataset`**: `DataSet` turns a candle series into labelled feature
  windows.
  - `create_policy` labels each window with the result of a policy function:
    0 means hold, 1 buy and 2 sell.
  - `serialize_labels` smooths the labels.
  - `get_data_set` returns the rows.
  - Two policies are included: `close_percentage_policy` and
    `ma_percentage_policy`.
- **`bullean.exchange`**: the order types `BuyInfo` and `SellInfo`, the
  `ExchangeClient` protocol (`buy`, `sell`, `get_symbol_balance`) and the
  helpers `to_float` and `round_down`.
- **`bullean.strategy`**: `Strategy` keeps a rolling window of at most
  `candle_limit` candles per symbol, filled through `next`.
  - `evaluate(long_condition, short_condition)` calls both conditions for each
    quote asset that has candles. A `PositionType.BUY` result opens a position
    on the given `ExchangeClient`, and a `PositionType.SELL` result closes it.
  - `percentage_change(val1, val2)` is a helper used by the policies.
- **`bullean.neural`**: a small feed-forward network and its parts.
  - `core`: `Config`, `Example`, `Examples`, the `Mode`, `ActivationType` and
    `LossType` enums, and `default_ffnn_config`.
  - `synapse`, `activation`, `layer`, `loss`, `solver` and `stats`: the
    building blocks. Among them are the `Adam` and `SGD` solvers.
  - `network`: `FFNN`, with `predict`, `weights`, `apply_weights` and JSON
    persistence through `marshal`, `unmarshal`, `save_model` and `load_model`.
  - `trainer`: `OnlineTrainer`, which updates the weights after every example.
  - `batch`: `BatchTrainer`, which computes mini-batch gradients in worker
    threads.
  - `printer`: `StatsPrinter`, which prints a progress table during training.
    The module also has `accuracy` and `cross_validate`.
  - `evaluator`: `Evaluator`, which trains several models on separate slices of
    the data and predicts buy, sell or hold by majority vote.
  - `qstar` and `qstar_trainer`: the Q-learning agent `QStar`, its `Game`
    environment and `QStarTrainer`.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Examples

Build a labelled dataset. Each window needs at least ten earlier candles for
the policy, so the input length here is 10:

```python
from bullean.entities import Candle, FeatureType, PolicyConfig
from bullean.dataset import DataSet, close_percentage_policy

candles = [Candle(symbol="BTCUSDT", close=100 + i) for i in range(60)]
dataset = DataSet(candles, 10)
dataset.create_policy(
    PolicyConfig(feat_name="close", feat_type=FeatureType.CLOSE, policy_range=5),
    close_percentage_policy,
)
rows = dataset.get_data_set()
```

Train a small network and save it:

```python
from bullean.neural.core import ActivationType, Config, Example, Examples, Mode
from bullean.neural.network import FFNN, load_model
from bullean.neural.solver import SGD
from bullean.neural.trainer import OnlineTrainer

config = Config(inputs=2, layout=[4, 1], activation=ActivationType.SIGMOID,
                mode=Mode.BINARY, bias=True)
network = FFNN(config)
data = Examples([Example([0, 0], [0]), Example([0, 1], [1]),
                 Example([1, 0], [1]), Example([1, 1], [0])])
OnlineTrainer(SGD(0.5, 0.1, 0, False), 0).train(network, data, data, 1000)
print(network.predict([1, 0]))
network.save_model("model.json")
restored = load_model("model.json")
```

Subscribe to the candle stream:

```python
from bullean.entities import ClientConfig, StreamReqMsg
from bullean.stream import new_client

config = ClientConfig(name="demo", api_key="placeholder", api_secret="secret",
                      stream_req_msg=StreamReqMsg(history=True, history_size=500))
client = new_client(config)
if client is not None:
    client.on_ready(lambda history: print(len(history), "candles"))
    client.on_candle(lambda batch: print(batch[-1].close))
```

## What it does not do

- There is no exchange connection. `ExchangeClient` is only a protocol. To
  place real orders, you must supply an object that has `buy`, `sell` and
  `get_symbol_balance`.
- There is no command-line program and no graphical interface. The package is
  a library only.
- There is no back-testing or forward-testing engine, and no model hub.

## Running the tests

```
pytest
```