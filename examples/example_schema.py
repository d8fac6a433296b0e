
import asyncio
from mysqldao import connect, create_mysql_dao, enable_sql_echo, Named

async def main():
    conn = await connect(host="host", port=3306, user="u", password="p", database="db")
    dao = create_mysql_dao("shop.orders", conn)
    enable_sql_echo(dao)

    await dao.ensure_load()
    print(dao.select_columns())
    print("id is pk:", dao.is_primary_key("id"), "customer_id indexed:", dao.is_index("customer_id"))

    ids = [1, 2, 3]
    sql = f"SELECT {dao.select_columns()} FROM shop.orders WHERE {dao.where_pair('id', ids)}"
    result = await dao.execute(sql, Named({"id": ids}))
    for row in result.rows:
        print(row)
    await conn.close()

asyncio.run(main())
