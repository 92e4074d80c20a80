# servkit

Building blocks for game and application servers: an indexable skip list,
a leaderboard built on it, a ring-buffer topic queue with ordered sequence
numbers, a small publish/subscribe hub, and a handful of utilities.

Everything runs in process and in memory; see "What it does not do" below.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Provides |
| --- | --- |
| `servkit.skiplist` | `SkipList`, `SkipIterator`: ordered list with lookup, insert and delete by value or by zero-based position |
| `servkit.rank_skip` | `RankSkip`: a leaderboard with optional maximum length and expiry; `RankModule` for callbacks; `RankChange`, `IncreaseRankData`, `SetSortAndExtendData`, `RankPosData` |
| `servkit.rank_data` | `RankData`, `RankEntry`, `ExtendIncData`, `ExpireHeap`, `new_rank_data`, `compare_more_than`, `compare_is_equal`, `transform_level` |
| `servkit.memory_queue` | `MemoryQueue`, `TopicData`, `SeqGenerator` |
| `servkit.pubsub` | `Publisher`, `BaseSubscriber` |
| `servkit.bisearch` | `bi_search`: binary search with left/right fallback |
| `servkit.bitwise` | `get_bitwise_num`, `get_bitwise_tag`, `set_bitwise_tag`, `clear_bitwise_tag` |
| `servkit.digest` | `hash_number` (CRC-32) and `md5_hex` |
| `servkit.aes_encrypt` | `AesEncrypt`: AES in CFB mode, IV taken from the key |
| `servkit.bytespool` | `BytesMemPool`: pool of byte buffers rounded up to size classes |
| `servkit.deepcopy` | `deep_copy`, `deep_clone`, honouring dataclass fields marked `metadata={"deepcopy": "-"}` |
| `servkit.coroutine` | `go`, `go_recover`: run callables on daemon threads, optionally restarting after exceptions |
| `servkit.buildinfo` | `get_build_date_time`, `get_build_tag` |

## Skip list

Items that have a `compare(other)` method are ordered by it; anything else
uses `<` and `>`. `SkipList(max_level)` accepts 8, 16, 32 or 64.

```python
from servkit.skiplist import SkipList

sl = SkipList(32)
sl.insert(30, 10, 20)
assert len(sl) == 3
assert sl.by_position(0) == 10
assert sl.get_with_position(20) == (20, 1)

cursor = sl.iter_at_position(1)
assert list(cursor) == [20, 30]

sl.delete(20)
left, right = sl.split_at(0)   # left holds 10, right holds 30
```

`insert` returns, for each item, the item it replaced (or `None`);
`delete` returns the removed items. `SkipIterator.next()` and `prev()`
step the cursor and return whether it landed on an item.

## Leaderboard

`RankSkip(rank_id, rank_name, is_desc, max_level, max_len, expire_ms, rank_module)`
keeps keys ordered by their sort data (a list of integers compared in
order), then by key. `max_len=0` means unbounded; when full, a new entry
that ranks better than the last one pushes it out. `expire_ms=0` means
entries never expire; otherwise expired entries are dropped (up to 128 at
a time) when the ranking is queried or updated in bulk.

```python
from servkit.rank_data import ExtendIncData, RankEntry
from servkit.rank_skip import IncreaseRankData, RankSkip

board = RankSkip(1, "score", True, 32, 100, 0, None)
added, modified = board.upsert_rank_list([
    RankEntry(key=1, sort_data=[50]),
    RankEntry(key=2, sort_data=[80], ex_data=[ExtendIncData(init_value=3)]),
])
data, rank = board.get_rank_node_data(2)
assert rank == 1

board.change_extend_data(IncreaseRankData(key=1, increase_sort_data=[40]))
top = board.get_rank_data_from_to_limit(0, 10)   # list of RankPosData, rank 1 first
assert [p.key for p in top] == [1, 2]

board.delete_rank_data([2])
```

Other queries: `get_rank_node_data_by_rank(rank)`,
`get_rank_key_prev_to_limit(key, count)` and
`get_rank_key_next_to_limit(key, count)` (both raise `LookupError` when the
ranking is empty or the key is not ranked), and `update_rank_data(key, data)`
to replace only the payload.

`RankModule` receives `on_enter_rank`, `on_leave_rank` and
`on_change_rank_data` as the board changes, plus `on_setup_rank`,
`on_start` and `on_stop` for the owner to call. The default module records
the rankings set up on it in `rank_skips`, whether it is `running`, and
counts events in `event_counts` keyed by `RankChange`. Subclass it to react
to changes, for example to save them.

## Topic queue

`MemoryQueue(capacity)` holds the most recent `capacity` `TopicData` items;
pushing into a full queue drops the oldest. `find_data(start_index, limit)`
returns up to `limit` items with `seq` at or after `start_index`, and a
flag that is `False` when the queue cannot answer (empty, or the wanted
items lie outside what it holds).

```python
from servkit.memory_queue import MemoryQueue, SeqGenerator, TopicData

queue = MemoryQueue(5)
for seq in range(1, 9):
    queue.push(TopicData(seq=seq))
found, in_memory = queue.find_data(5, 10)
assert [d.seq for d in found] == [5, 6, 7, 8]

seqs = SeqGenerator()
first = seqs.next_seq()   # unix seconds << 32 | per-second counter from 1
```

## Publish/subscribe

```python
from servkit.pubsub import BaseSubscriber, Publisher

received = []
pub = Publisher()
sub = BaseSubscriber(lambda *args: received.append(args))
pub.subscribe(1, sub)          # topic 0 is refused
pub.publish(1, "hello")
pub.unsubscribe_key(sub.key)   # or pub.unsubscribe(1) to drop the whole topic
assert received == [("hello",)]
```

## Utilities

```python
from servkit.aes_encrypt import AesEncrypt
from servkit.bisearch import bi_search
from servkit.bitwise import get_bitwise_tag, set_bitwise_tag
from servkit.digest import hash_number, md5_hex

assert bi_search([10, 12, 14, 16], 11, 1) == 1    # nearest to the right
assert bi_search([10, 12, 14, 16], 11, -1) == 0   # nearest to the left

flags = [0] * 10
set_bitwise_tag(flags, 79)     # 8 bits per item by default
assert get_bitwise_tag(flags, 79)

aes = AesEncrypt("0123456789abcdef")   # at least 16 bytes
assert aes.decrypt(aes.encrypt("text")) == "text"

md5_hex("")          # 'd41d8cd98f00b204e9800998ecf8427e'
hash_number("abc")   # CRC-32 of the UTF-8 bytes
```

`BytesMemPool().make_bytes(size)` returns a writable `memoryview` of
`size` bytes over a pooled `bytearray`; `release_bytes` hands it back.

## What it does not do

servkit is a library of in-memory pieces. It has no network servers
(HTTP, TCP or WebSocket), no remote-call layer, no command-line tool and no
storage backend: `MemoryQueue` and `RankSkip` lose their contents when the
process ends. To persist a leaderboard, subclass `RankModule` and save the
changes it is told about.