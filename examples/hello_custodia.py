import time

import custodia

OWNER = "0x" + "0" * 39 + "1"
FARM = "0x" + "f" * 40
CARRIER = "0x" + "c" * 40
LAB = "0x" + "1ab" + "0" * 37


def main() -> None:
    server = custodia.run(port=57794, owner=OWNER)
    if isinstance(server, custodia.CustodiaClient):
        raise SystemExit(f"already running at {server.base_url}; stop it or pick another port")

    farm = server.client(FARM)
    carrier = server.client(CARRIER)
    admin = server.client(OWNER)
    lab = server.client(LAB)

    now = int(time.time())
    milk = farm.register_product("Milk", "Dairy", now, now + 7 * 24 * 3600, "Green Valley Farm")
    farm.transfer_product(milk, CARRIER, "Cold Storage #4")

    admin.add_authorized_updater(LAB)
    lab.update_freshness(milk, 92)

    info = carrier.get_product_info(milk)
    print(f"product {info.id}: {info.name} owned by {info.current_owner}, freshness {info.freshness_score}")
    print("journey:", " -> ".join(info.locations))
    for e in carrier.events():
        print(e)

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
