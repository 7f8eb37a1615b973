"""
Load test for the audience vote endpoint.
Simulates a crowd of phones voting for the current rider at once.

Voting must be open for RIDER_ID before running this.
"""

import asyncio
import random
import time
import aiohttp

# -----------------------------
# CONFIG: ADJUST IF NEEDED
# -----------------------------
BASE_URL = "http://127.0.0.1:5000"

RIDER_ID = "rider_xxx"  # the rider currently on the floor

# Distinct fake devices; some will vote twice to hit the duplicate path
DEVICE_COUNT = 1500

# Total POST requests to send
TOTAL_REQUESTS = 2000

# How many run simultaneously
MAX_CONCURRENT = 150


# -----------------------------
# Load test functions
# -----------------------------
async def submit_vote(session, device_id):
    payload = {
        "rider_id": RIDER_ID,
        "device_id": device_id,
        "score": random.randint(1, 5),
    }

    try:
        async with session.post(f"{BASE_URL}/api/audience/vote", json=payload) as resp:
            text = await resp.text()
            if resp.status not in (200, 409):
                print(f"[ERROR {resp.status}] {payload} :: {text[:200]}")
            return resp.status
    except aiohttp.ClientError as e:
        print(f"[EXCEPTION] {e} :: {payload}")
        return None


async def worker(session, task_queue, statuses):
    while True:
        device_id = await task_queue.get()
        if device_id is None:
            task_queue.task_done()
            break

        statuses.append(await submit_vote(session, device_id))
        task_queue.task_done()


async def main():
    task_queue = asyncio.Queue()
    statuses = []

    for _ in range(TOTAL_REQUESTS):
        await task_queue.put(f"loadtest-device-{random.randint(1, DEVICE_COUNT)}")

    # Sentinel None tasks to close workers
    for _ in range(MAX_CONCURRENT):
        await task_queue.put(None)

    timeout = aiohttp.ClientTimeout(total=30)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        workers = [
            asyncio.create_task(worker(session, task_queue, statuses))
            for _ in range(MAX_CONCURRENT)
        ]

        print(f"Sending {TOTAL_REQUESTS} votes with concurrency {MAX_CONCURRENT}...")
        start = time.time()

        await task_queue.join()
        end = time.time()

        for w in workers:
            await w

    accepted = sum(1 for s in statuses if s == 200)
    duplicates = sum(1 for s in statuses if s == 409)
    print(f"Completed in {end - start:.2f} seconds: {accepted} accepted, {duplicates} duplicates")


if __name__ == "__main__":
    asyncio.run(main())
