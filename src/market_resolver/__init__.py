"""Resolution and pari-mutuel settlement engine for YES/NO price prediction markets."""
