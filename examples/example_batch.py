
import asyncio
from datetime import datetime
from mysqldao import create_pool, create_mysql_dao, Named, Positional

async def main():
    pool = await create_pool(host="host", port=3306, user="u", password="p", database="db", maxsize=4)
    dao = create_mysql_dao("orders", pool)
    await dao.ensure_load()

    cols = ["status", "updated_at"]
    now = datetime.utcnow()
    update = f"UPDATE orders SET {dao.columns_pair(cols)} WHERE id=:id"
    await dao.batch([
        (update, Named({"id": 1, "status": "shipped", "updated_at": now})),
        (update, Named({"id": 2, "status": "cancelled", "updated_at": now})),
        ("DELETE FROM ?? WHERE id = ?", Positional(["orders", 3])),
    ])

    result = await dao.execute(f"SELECT {dao.select_columns(['id', 'status'])} FROM orders WHERE updated_at >= :since",
                               Named({"since": now}))
    for row in result.rows:
        print(row)
    await pool.close()

asyncio.run(main())
