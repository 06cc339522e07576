# Observe every public call on a small client object and print the records.
import asyncio

import memberprobe


class Client:
    def get(self, path):
        return {"path": path}

    async def fetch(self, path):
        await asyncio.sleep(0)
        return {"path": path, "async": True}


records = []
client = Client()
memberprobe.instrument(
    client,
    rules=[memberprobe.regex(r"^(get|fetch)$")],
    logger=records.append,
    await_promises=True,
)

client.get("/a")
asyncio.run(client.fetch("/b"))

for r in records:
    print(r.phase, r.key, r.args, r.result)

assert [r.phase for r in records] == ["call", "call", "resolved"]
