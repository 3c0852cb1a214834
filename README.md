# mcastxfer

Send files to any number of receivers at once over IP multicast.

Each file is cut into 1024-byte chunks. Every chunk travels with a
20-byte header: file id, sequence number, total chunk count, data size
and an additive checksum (the sum of the chunk's bytes, wrapped to 32
bits). Receivers that miss a chunk ask for it again with an 8-byte
negative acknowledgement (NAK), and the sender resends just that chunk.

All traffic, data and NAKs alike, uses the multicast group `239.0.0.1`,
port `5000`.

## Installing

```
pip install .
```

## Receiving

Start one or more receivers first:

```
mcastxfer-receive
```

A receiver joins the group and checks each incoming chunk against its
checksum; a chunk that does not match is reported on standard error and
dropped. Duplicate chunks are ignored. Accepted chunks are held in
memory and written to `received_files/file_<id>` at their offsets once
ten of them are pending, and again when the file is complete, at which
point the file is closed.

Every ten seconds the receiver sends a NAK for each chunk still missing
from every file that is not yet complete. It runs until interrupted
(Ctrl-C).

## Sending

```
mcastxfer-send report.pdf photo.jpg
```

Files are numbered from 0 in the order given on the command line; that
number is the file id the receivers use for the output name. After
sending every chunk of a file, the sender listens for NAKs for that file
for 100 seconds, resending each chunk asked for, before moving on to the
next file. NAKs for another file id, or for a chunk beyond the end of
the file, are not answered. A file that cannot be read is reported on
standard error and skipped (its id is still used up).

## Using it from Python

```python
from mcastxfer.multicast import MulticastChannel
from mcastxfer.sender import Sender

with MulticastChannel("239.0.0.1", 5000, 5000) as channel:
    channel.setup_recv()
    Sender(channel, wait_seconds=30).send_file(0, "report.pdf")
```

On the receiving side, `mcastxfer.receiver.Receiver(channel, output_dir)`
takes raw datagrams through `handle_packet()`, or runs its own loop with
`run()`; `send_naks()` requests every missing chunk once.

`mcastxfer.protocol` holds the wire format: `ChunkHeader.pack()` and
`ChunkHeader.unpack()`, `compute_checksum()`, and `pack_nak()` /
`unpack_nak()` for the NAK packets. `mcastxfer.sender.build_packets()`
splits bytes into ready-to-send data packets.

## What it does not do

- The group, port and output directory of the commands are fixed; there
  are no command-line options to change them.
- Output files are named only by file id; the original file names are
  not transmitted.
- A receiver accepts file ids 0 to 99 only.
- There is no check of the file as a whole and no end-of-transfer
  message: a receiver knows a file is done only when every chunk has
  arrived, and a file that never completes is left partly written.

## Running the tests

```
pip install .[test]
pytest
```