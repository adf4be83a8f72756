"""
Timed Auction Contract (TAC)

A single English auction with escrowed settlement:
- Minimum-increment bidding with deadline extension
- Excess withdrawal while the auction runs
- Commission-bearing refunds for losing parties
- Explicit clock, caller identity and value-transfer collaborators
"""
