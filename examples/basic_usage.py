"""Basic usage example for the etcdkv client."""

import asyncio

from etcdkv import (
    ClientConfig,
    ClusterError,
    EtcdClient,
    EtcdError,
    WatchOptions,
    WatchTimeoutError,
)


async def main() -> None:
    """Demonstrate basic etcd operations."""
    # Create client configuration
    config = ClientConfig(
        endpoints=[
            "http://localhost:2379",  # Tried first
            "http://localhost:22379",  # Tried if the first fails
        ],
        timeout=5000,  # Request timeout in milliseconds
    )

    # Use async context manager for automatic connection management
    async with EtcdClient(config) as client:
        # Set a value
        print("1. Setting key-value pair...")
        response = await client.set("/users/123", "Alice")
        print(f"   Stored at index {response.data.node.modified_index}")

        # Get a value
        print("\n2. Getting value...")
        response = await client.get("/users/123")
        print(f"   Retrieved: {response.data.node.value}")
        print(f"   Cluster index: {response.cluster_info.etcd_index}")

        # Set with TTL
        print("\n3. Setting with TTL (5 seconds)...")
        response = await client.set("/sessions/456", "temporary-data", ttl=5)
        print(f"   Expires at {response.data.node.expiration}")

        # Create only if not exists
        print("\n4. Creating an existing key...")
        try:
            await client.create("/users/123", "Bob")
            print("   Value created")
        except ClusterError as e:
            print(f"   Expected error: {e}")

        # Compare and swap
        print("\n5. Compare and swap...")
        response = await client.compare_and_swap(
            "/users/123", "Carol", current_value="Alice"
        )
        print(f"   Swapped {response.data.prev_node.value} for {response.data.node.value}")

        # Watch with a timeout
        print("\n6. Watching for changes (1 second)...")
        try:
            response = await client.watch("/users/123", WatchOptions(timeout=1.0))
            print(f"   Changed to {response.data.node.value}")
        except WatchTimeoutError:
            print("   No change")

        # Delete a value
        print("\n7. Deleting key...")
        response = await client.delete("/users/123")
        print(f"   Deleted value: {response.data.prev_node.value}")

        # Check every endpoint
        print("\n8. Checking endpoint health...")
        try:
            async for health in client.health():
                print(f"   health={health.data.health}")
        except EtcdError as e:
            print(f"   Check failed: {e}")

    print("\nClient closed")


if __name__ == "__main__":
    asyncio.run(main())
