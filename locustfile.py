from locust import HttpUser, between, task
import random
import string

# Solana-style base58 alphabet
_B58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
CHECKPOINTS = [f"cp-{i}" for i in range(1, 21)]


def _random_evm() -> str:
    return "0x" + "".join(random.choices("0123456789abcdef", k=40))


def _random_stellar() -> str:
    return "G" + "".join(random.choices(string.ascii_uppercase + "234567", k=55))


class CheckinUser(HttpUser):
    wait_time = between(1, 2)

    def on_start(self):
        # one wallet per simulated user so the daily limit kicks in after 10 check-ins
        self.evm_wallet = _random_evm()
        self.solana_wallet = "".join(random.choices(_B58, k=44))
        self.stellar_wallet = _random_stellar()

    @task(3)
    def evm_checkin(self):
        self.client.post(
            "/api/checkin",
            json={"chain": "evm", "walletAddress": self.evm_wallet, "checkpoint": random.choice(CHECKPOINTS)},
            name="/api/checkin",
        )

    @task(2)
    def solana_checkin(self):
        self.client.post(
            "/api/solana-checkin",
            json={"solanaWalletAddress": self.solana_wallet, "checkpoint": random.choice(CHECKPOINTS)},
        )

    @task(1)
    def stellar_checkin(self):
        self.client.post(
            "/api/stellar-checkin",
            json={"stellarWalletAddress": self.stellar_wallet, "checkpoint": random.choice(CHECKPOINTS)},
        )

    @task(1)
    def checkin_status(self):
        self.client.get(
            "/api/checkin-status",
            params={"address": self.evm_wallet, "checkpoint": random.choice(CHECKPOINTS)},
            name="/api/checkin-status",
        )
