DRAFT_TABLES = ("step1", "step2", "step3", "upload")
PUBLISHED_TABLE = "step4"


class QueryBuilder:
    @staticmethod
    def build_upsert_query(data: dict, table_name: str, conflict_column: str = "listing_id") -> tuple[str, list]:
        """
        Build INSERT ... ON CONFLICT DO UPDATE query and values from dict.
        Does NOT execute - returns query and values for the caller to execute.

        Every column other than the conflict column is overwritten with the
        incoming value, so the stored row ends up exactly equal to ``data``.

        Args:
            data: Dictionary of column names and values (must include conflict_column)
            table_name: Name of the table to upsert into
            conflict_column: Unique column deciding insert vs. update

        Returns:
            Tuple of (query_string, values_list)

        Example:
            query, values = QueryBuilder.build_upsert_query(
                {"listing_id": "1700000000000_42", "city": "Austin"}, "step3"
            )
            await conn.execute(query, *values)
        """
        # Whitelist table names
        if table_name not in DRAFT_TABLES + (PUBLISHED_TABLE,):
            raise ValueError(f"Invalid table: {table_name}")

        if conflict_column not in data:
            raise ValueError(f"Missing conflict column: {conflict_column}")

        columns = list(data.keys())
        placeholders = ", ".join([f"${i+1}" for i in range(len(columns))])
        values = list(data.values())

        set_clauses = [f"{col} = EXCLUDED.{col}" for col in columns if col != conflict_column]
        if set_clauses:
            on_conflict = f"DO UPDATE SET {', '.join(set_clauses)}"
        else:
            on_conflict = "DO NOTHING"

        query = (
            f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT ({conflict_column}) {on_conflict}"
        )

        return query, values

    @staticmethod
    def build_seed_query(table_name: str) -> str:
        """INSERT that creates an empty draft row and leaves an existing one alone."""
        if table_name not in DRAFT_TABLES:
            raise ValueError(f"Invalid table: {table_name}")

        return f"INSERT INTO {table_name} (listing_id) VALUES ($1) ON CONFLICT DO NOTHING"
